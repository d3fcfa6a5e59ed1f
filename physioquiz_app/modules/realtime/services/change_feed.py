"""
Change Feed
In-process version counters, one per watched table. A counter moves once per
commit that touched its table; pollers compare it with the last value they saw.

Counters are per process: every worker keeps its own, which is enough for
"something changed, re-fetch everything".
"""
import threading
from typing import Dict, Iterable, Optional, Tuple

WATCHED_TABLES = ('daily_quiz', 'leaderboard', 'quiz_attempts', 'quiz_history')

# Tables written as a side effect of another table's insert (ledger roll-up)
DERIVED_TABLES = {
    'quiz_history': ('leaderboard',),
}


class ChangeFeed:

    def __init__(self, tables: Iterable[str] = WATCHED_TABLES):
        self._lock = threading.Lock()
        self._versions: Dict[str, int] = {table: 0 for table in tables}

    def is_watched(self, table: str) -> bool:
        return table in self._versions

    def version(self, table: str) -> int:
        with self._lock:
            return self._versions.get(table, 0)

    def versions(self) -> Dict[str, int]:
        with self._lock:
            return dict(self._versions)

    def bump(self, table: str) -> Optional[int]:
        """Advance one table's counter. Unwatched tables are ignored."""
        with self._lock:
            if table not in self._versions:
                return None
            self._versions[table] += 1
            return self._versions[table]

    def changed_since(self, table: str, since: int) -> Tuple[int, bool]:
        current = self.version(table)
        return current, current > since

    @staticmethod
    def expand(tables: Iterable[str]) -> set:
        """Add tables that change implicitly with the given ones."""
        expanded = set(tables)
        for table in list(expanded):
            expanded.update(DERIVED_TABLES.get(table, ()))
        return expanded


change_feed = ChangeFeed()
