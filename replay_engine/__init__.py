"""
Disc Replay Engine

Deterministic, time-driven playback of recorded four-in-a-row games.
"""

__version__ = "0.1.0"
