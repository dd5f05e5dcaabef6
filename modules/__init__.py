"""
Pipeline modules.
"""
