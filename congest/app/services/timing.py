"""
Translation of a service's interval into a firing rule.

A firing rule is either :class:`OneShot` (fire once at an absolute
instant) or :class:`Repeating` (fire every period, starting one period
after registration).  The functions here are pure: they never touch
the scheduler.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional, Union

logger = logging.getLogger(__name__)

# Recurring schedules have whole-second granularity.
MIN_PERIOD_SECONDS = 1

# Longest accepted delay or period: ten years, in milliseconds.  Keeps
# one-shot instants far inside the range ``datetime`` can represent.
MAX_INTERVAL_MS = 10 * 365 * 24 * 60 * 60 * 1000


@dataclass(frozen=True)
class OneShot:
    """Fire exactly once at ``at`` (timezone-aware)."""

    at: datetime


@dataclass(frozen=True)
class Repeating:
    """Fire every ``period`` until stopped."""

    period: timedelta


FiringRule = Union[OneShot, Repeating]


def to_firing_rule(
    interval_ms: int,
    recurring: bool,
    now: Optional[datetime] = None,
) -> FiringRule:
    """Return the firing rule for ``interval_ms`` milliseconds.

    Parameters
    ----------
    interval_ms : int
        Non-negative number of milliseconds.  A one-shot delay when
        ``recurring`` is false, otherwise the repeat period.
    recurring : bool
        Whether the service fires repeatedly.
    now : datetime, optional
        Reference instant for one-shot rules.  Defaults to the current
        UTC time.

    Raises
    ------
    ValueError
        If ``interval_ms`` is negative or above ``MAX_INTERVAL_MS``.
    """
    if interval_ms < 0:
        raise ValueError(f"interval must be non-negative, got {interval_ms}")
    if interval_ms > MAX_INTERVAL_MS:
        raise ValueError(f"interval must not exceed {MAX_INTERVAL_MS}ms, got {interval_ms}")

    if not recurring:
        reference = now or datetime.now(timezone.utc)
        return OneShot(at=reference + timedelta(milliseconds=interval_ms))

    seconds = interval_ms // 1000
    if seconds < MIN_PERIOD_SECONDS:
        logger.warning(
            "Recurring interval of %sms is below %ss; using %ss",
            interval_ms,
            MIN_PERIOD_SECONDS,
            MIN_PERIOD_SECONDS,
        )
        seconds = MIN_PERIOD_SECONDS
    return Repeating(period=timedelta(seconds=seconds))
