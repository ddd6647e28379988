from typing import Dict, Iterator, Optional

from strikeguard.datatypes.spam_datatypes import UserActivityRecord, UserKey


class ActivityStore:
    """In-memory map of user key to :class:`UserActivityRecord`.

    Each detector owns its own store so separate guilds (and separate tests)
    never share state. Records are created lazily and live for the lifetime
    of the store.
    """

    def __init__(self) -> None:
        self._records: Dict[UserKey, UserActivityRecord] = {}

    def get_or_create(self, user_id: UserKey) -> UserActivityRecord:
        record = self._records.get(user_id)
        if record is None:
            record = UserActivityRecord()
            self._records[user_id] = record
        return record

    def get(self, user_id: UserKey) -> Optional[UserActivityRecord]:
        return self._records.get(user_id)

    def discard(self, user_id: UserKey) -> None:
        self._records.pop(user_id, None)

    def __contains__(self, user_id: object) -> bool:
        return user_id in self._records

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[UserKey]:
        return iter(list(self._records))
