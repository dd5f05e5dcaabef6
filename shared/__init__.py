"""
Shared components used across pipeline modules.
"""
