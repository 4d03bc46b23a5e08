"""
Mint phases and countdowns.

A phase is open until its due date; the countdown breaks the remaining
time into days, hours, minutes and seconds.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional, Union


MAX_MINT_PER_TX = 10

_TIME_RE = re.compile(r"\d{1,2}:\d{2}")


@dataclass(frozen=True)
class TimeRemaining:
    days: int = 0
    hours: int = 0
    minutes: int = 0
    seconds: int = 0
    expired: bool = False

    def __str__(self) -> str:
        if self.expired:
            return "Ended"
        return f"{self.days}d {self.hours}h {self.minutes}m {self.seconds}s"


def parse_target(target: Union[str, datetime]) -> datetime:
    """
    Parse a countdown target.

    Accepts ``YYYY/MM/DD`` or ``YYYY-MM-DD``, optionally with a time.
    A date-only target means local midnight of that day.
    """
    if isinstance(target, datetime):
        return target
    text = target.strip().replace("/", "-")
    if "T" not in text and not _TIME_RE.search(text):
        return datetime.strptime(text, "%Y-%m-%d")
    return datetime.fromisoformat(text.replace(" ", "T"))


def time_remaining(target: Union[str, datetime], now: Optional[datetime] = None) -> TimeRemaining:
    due = parse_target(target)
    if now is None:
        now = datetime.now(due.tzinfo)
    distance = (due - now).total_seconds()
    if distance < 0:
        return TimeRemaining(expired=True)

    total = int(distance)
    days, rest = divmod(total, 86400)
    hours, rest = divmod(rest, 3600)
    minutes, seconds = divmod(rest, 60)
    return TimeRemaining(days=days, hours=hours, minutes=minutes, seconds=seconds)


@dataclass(frozen=True)
class MintPhase:
    name: str
    due: str
    price_eth: Decimal

    def remaining(self, now: Optional[datetime] = None) -> TimeRemaining:
        return time_remaining(self.due, now)

    def is_open(self, now: Optional[datetime] = None) -> bool:
        return not self.remaining(now).expired

    def cost(self, quantity: int) -> Decimal:
        return self.price_eth * quantity


DEFAULT_PHASES = (
    MintPhase(name="Whitelist", due="2025/10/22", price_eth=Decimal("0.02")),
    MintPhase(name="Public", due="2025/10/29", price_eth=Decimal("0.04")),
)


def current_phase(phases=DEFAULT_PHASES, now: Optional[datetime] = None) -> Optional[MintPhase]:
    """First phase that has not ended yet, or None once all have."""
    for phase in phases:
        if phase.is_open(now):
            return phase
    return None


__all__ = [
    "MAX_MINT_PER_TX",
    "TimeRemaining",
    "MintPhase",
    "DEFAULT_PHASES",
    "parse_target",
    "time_remaining",
    "current_phase",
]
