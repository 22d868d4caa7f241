from __future__ import annotations

import time
from typing import Optional

from .models import SessionMode, SessionState


def ensure_started(state: SessionState, now: Optional[float] = None) -> float:
    if state.practice_start_time is None:
        state.practice_start_time = time.time() if now is None else now
    return state.practice_start_time


def elapsed_seconds(state: SessionState, now: Optional[float] = None) -> int:
    """Whole seconds since the session started, measured from the stored timestamp."""
    if state.practice_start_time is None:
        return 0
    now = time.time() if now is None else now
    return max(0, int((now - state.practice_start_time) // 1))


def time_limit_seconds(state: SessionState) -> Optional[int]:
    config = state.session_config
    if config.mode != SessionMode.TIME or not config.time_limit:
        return None
    return config.time_limit * 60


def remaining_seconds(state: SessionState, now: Optional[float] = None) -> Optional[float]:
    limit = time_limit_seconds(state)
    if limit is None:
        return None
    if state.practice_start_time is None:
        return float(limit)
    now = time.time() if now is None else now
    return max(0.0, limit - (now - state.practice_start_time))


def expired(state: SessionState, now: Optional[float] = None) -> bool:
    limit = time_limit_seconds(state)
    return limit is not None and elapsed_seconds(state, now) >= limit
