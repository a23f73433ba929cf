"""
Session identifier generation.
"""

import hashlib


def stable_id(*parts: str, length: int = 16) -> str:
    """
    Derive an identifier from its inputs (no randomness).

    Example:
        stable_id("replay", "game-42", "3") -> "replay_9f1c..."
    """
    raw = "|".join(parts).encode("utf-8")
    digest = hashlib.sha256(raw).hexdigest()[:length]
    return f"{parts[0]}_{digest}" if parts else digest
