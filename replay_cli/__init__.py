"""
Replay CLI - terminal viewer for recorded games

Commands:
- replay inspect - Game record metadata and move list
- replay show - Board at one replay position
- replay play - Real-time auto-play
"""

__version__ = "0.1.0"
