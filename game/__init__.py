"""
Game Module - session state machine, scheduled events and level flow
"""
