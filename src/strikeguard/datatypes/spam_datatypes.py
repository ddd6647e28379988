"""
Data structures shared by the spam detector and its consumers.

This module defines the per-user activity record kept by the detector and the
verdict values returned for every observed message.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Hashable, Optional, Union

# Opaque user key; Discord snowflakes in production, anything hashable in tests.
UserKey = Hashable


@dataclass(slots=True)
class UserActivityRecord:
    """Recent message timestamps and strike history for one user.

    Attributes:
        timestamps: Event times in milliseconds, oldest first, all inside the
            trailing window after each evaluation.
        strikes: Number of violations declared so far. Only ever incremented,
            unless strike decay is configured.
        last_violation_ms: Timestamp of the most recent violation, or None.
    """
    timestamps: Deque[int] = field(default_factory=deque)
    strikes: int = 0
    last_violation_ms: Optional[int] = None


@dataclass(frozen=True, slots=True)
class NoViolation:
    """Verdict for a message that keeps the user under the threshold."""

    @property
    def is_violation(self) -> bool:
        return False

    def __bool__(self) -> bool:
        return False


@dataclass(frozen=True, slots=True)
class Violation:
    """Verdict for a message that pushed the user over the threshold.

    Attributes:
        strikes: The user's strike count including this violation (1-based).
        penalty_minutes: Timeout length to apply for this violation.
    """
    strikes: int
    penalty_minutes: int

    @property
    def is_violation(self) -> bool:
        return True

    def __bool__(self) -> bool:
        return True


Verdict = Union[NoViolation, Violation]

NO_VIOLATION = NoViolation()
