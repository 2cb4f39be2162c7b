# scanner.py
import datetime
import logging
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DueReminder:
    id: int
    title: str
    due_at: datetime.datetime
    address: str


def find_due_reminders(store, now, lookahead):
    """Reminders due within [now, now + lookahead] with a resolvable owner address.

    Store errors propagate to the caller. Reminders whose owner is missing or
    has no email are skipped.
    """
    due = []
    for r in store.find_due(now, now + lookahead):
        if r.user is None:
            logger.warning(f"Skipping reminder {r.id}: owner {r.user_id} not found")
            continue
        if not r.user.email:
            logger.warning(f"Skipping reminder {r.id}: owner {r.user_id} has no email address")
            continue
        due.append(DueReminder(r.id, r.title, r.due_at, r.user.email))
    return due
