"""
Rolling-window spam detection with escalating timeout penalties.

A user who sends more than ``threshold`` messages inside the trailing
``window_ms`` is flagged. Each flag adds a strike, and the penalty grows as
``base_minutes * multiplier ** (strikes - 1)``: 5, 10, 20, 40 ... minutes with
the default settings. The window is cleared on every violation so a single
burst is never punished twice.
"""

import threading

from strikeguard.configuration.spam_settings import SpamDetectionSettings
from strikeguard.datatypes.spam_datatypes import (
    NO_VIOLATION,
    UserActivityRecord,
    UserKey,
    Verdict,
    Violation,
)
from strikeguard.spam.activity_store import ActivityStore


class SpamDetector:
    """Per-scope spam detector owning its own :class:`ActivityStore`."""

    def __init__(self, settings: SpamDetectionSettings | None = None, store: ActivityStore | None = None) -> None:
        self.settings = settings or SpamDetectionSettings()
        self.store = store if store is not None else ActivityStore()
        self._lock = threading.Lock()

    def penalty_minutes(self, strikes: int) -> int:
        """Return the timeout length in minutes for the given (1-based) strike."""
        return self.settings.base_minutes * self.settings.multiplier ** (strikes - 1)

    def record_event(self, user_id: UserKey, timestamp_ms: int) -> Verdict:
        """Register one message from ``user_id`` at ``timestamp_ms`` and classify it.

        The caller's clock is trusted as-is: timestamps are expected to be
        non-decreasing per user, but negative or out-of-order values are not
        rejected and simply take part in the window arithmetic.

        Returns:
            Verdict: ``Violation`` carrying the updated strike count and penalty
            when the trailing window now holds more than ``threshold`` events,
            otherwise ``NoViolation``.
        """
        with self._lock:
            record = self.store.get_or_create(user_id)

            window_start = timestamp_ms - self.settings.window_ms
            while record.timestamps and record.timestamps[0] < window_start:
                record.timestamps.popleft()

            record.timestamps.append(timestamp_ms)

            if len(record.timestamps) <= self.settings.threshold:
                return NO_VIOLATION

            self._apply_strike_decay(record, timestamp_ms)
            record.strikes += 1
            record.last_violation_ms = timestamp_ms
            record.timestamps.clear()

            return Violation(strikes=record.strikes, penalty_minutes=self.penalty_minutes(record.strikes))

    def _apply_strike_decay(self, record: UserActivityRecord, timestamp_ms: int) -> None:
        # One strike forgiven per full decay period since the previous violation.
        decay_ms = self.settings.strike_decay_ms
        if not decay_ms or record.last_violation_ms is None or record.strikes == 0:
            return
        elapsed = timestamp_ms - record.last_violation_ms
        if elapsed < decay_ms:
            return
        record.strikes = max(0, record.strikes - elapsed // decay_ms)

    def strikes_for(self, user_id: UserKey) -> int:
        """Return the current strike count for ``user_id`` (0 if never seen)."""
        record = self.store.get(user_id)
        return record.strikes if record else 0

    def reset(self, user_id: UserKey) -> None:
        """Forget all activity and strikes recorded for ``user_id``."""
        with self._lock:
            self.store.discard(user_id)
