"""Emission scheduling for trail markers.

Each ant drops one marker per spawn period.  To avoid every ant
emitting on the same tick, an ant's emission tick within the period is
offset by a stable hash of its id.  The hash is CRC-32 so the schedule
is identical across processes (unlike the salted built-in ``hash``).
"""

from __future__ import annotations

import zlib


def frame_count(period: float, dt: float) -> int:
    """Convert an emission period in seconds to a tick count.

    Args:
        period: Seconds between emissions (must be > 0).
        dt: Fixed tick duration in seconds (must be > 0).

    Returns:
        Ticks per period, at least 1.

    Raises:
        ValueError: If ``period`` or ``dt`` is not positive.
    """
    if period <= 0 or dt <= 0:
        msg = f"period and dt must be positive, got period={period} dt={dt}"
        raise ValueError(msg)
    return max(1, round(period / dt))


def stable_hash(ant_id: int) -> int:
    """Return a process-independent hash of an ant id."""
    return zlib.crc32(str(ant_id).encode("ascii"))


def emission_offset(ant_id: int, frames: int) -> int:
    """Return the tick within each period at which ``ant_id`` emits."""
    return stable_hash(ant_id) % frames


def should_emit(ant_id: int, tick: int, frames: int) -> bool:
    """Return True if ``ant_id`` drops a marker on ``tick``."""
    return tick % frames == emission_offset(ant_id, frames)
