"""
Entities Module - player controller, pursuer and bystander NPCs
"""
