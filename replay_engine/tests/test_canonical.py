"""
Tests for canonical serialization.

Critical: equal replay positions must serialize to identical bytes.
"""

from datetime import datetime

from replay_engine.core.canonical import canonicalize, canonical_json_bytes, canonical_json_str
from replay_engine.core.clock import ManualScheduler
from replay_engine.core.types import ReplaySpeed
from replay_engine.replay.controller import PlaybackController
from replay_engine.tests.helpers import horizontal_win_record


def test_canonicalize_dict_key_order():
    """Dict key order must not affect canonical output."""
    d1 = {"z": 1, "a": 2, "m": 3}
    d2 = {"a": 2, "m": 3, "z": 1}

    assert canonicalize(d1) == canonicalize(d2)


def test_canonicalize_enums_tuples_and_datetimes():
    obj = {"speed": ReplaySpeed.DOUBLE, "cells": ((5, 0), (5, 1)), "at": datetime(2024, 1, 2)}

    assert canonicalize(obj) == {
        "at": "2024-01-02T00:00:00",
        "cells": [[5, 0], [5, 1]],
        "speed": "2x",
    }


def test_canonical_json_str_is_compact_and_sorted():
    assert canonical_json_str({"b": 2, "a": 1}) == '{"a":1,"b":2}'
    assert canonical_json_bytes({"key": "日本語"}) == '{"key":"日本語"}'.encode("utf-8")


def test_state_digest_independent_of_path():
    """Reaching a position by stepping, seeking or auto-play gives the same digest."""
    record = horizontal_win_record()

    stepped = PlaybackController(record, scheduler=ManualScheduler())
    for _ in range(4):
        stepped.next()

    seeked = PlaybackController(record, scheduler=ManualScheduler())
    seeked.seek(7)
    seeked.seek(4)

    scheduler = ManualScheduler()
    played = PlaybackController(record, scheduler=scheduler)
    played.play()
    scheduler.advance(4000)
    played.pause()

    digests = {c.get_state().digest() for c in (stepped, seeked, played)}
    assert len(digests) == 1
