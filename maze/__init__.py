"""
Maze Module - grid generation, A* pathfinding and distance fields
"""
