"""
Music engineer module.

Assembles independently generated clips into one music-synchronized video:
aligns shots to beats, picks transitions, drives the external renderer and
scores the result.
"""

from modules.music_engineer.process import process

assemble = process

__all__ = ["process", "assemble"]
