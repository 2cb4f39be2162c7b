# store.py
import logging

from sqlalchemy import or_, false, true

from database import SessionLocal
from models import Reminder

logger = logging.getLogger(__name__)


def _not_notified():
    return or_(Reminder.notified.is_(None), Reminder.notified == false())


class ReminderStore:
    """Query and conditional-update access to the reminders table."""

    def __init__(self, session_factory=SessionLocal):
        self.session_factory = session_factory

    def find_due(self, start, end):
        """Reminders due in [start, end] that have not been notified, oldest first.

        The owning user is loaded with each reminder (``reminder.user``) and is
        ``None`` when the user row no longer exists.
        """
        db = self.session_factory()
        try:
            return db.query(Reminder).filter(
                Reminder.due_at >= start,
                Reminder.due_at <= end,
                _not_notified(),
            ).order_by(Reminder.due_at, Reminder.id).all()
        finally:
            db.close()

    def mark_notified(self, reminder_id):
        """Set notified=True only if it is not already set. Returns rows affected.

        Zero means the reminder was already notified or no longer exists.
        """
        db = self.session_factory()
        try:
            affected = db.query(Reminder).filter(
                Reminder.id == reminder_id,
                _not_notified(),
            ).update({Reminder.notified: True}, synchronize_session=False)
            db.commit()
            return affected
        finally:
            db.close()

    def reset_notifications(self):
        """Clear the notified flag on every reminder. Returns rows affected."""
        db = self.session_factory()
        try:
            affected = db.query(Reminder).filter(
                Reminder.notified == true()
            ).update({Reminder.notified: None}, synchronize_session=False)
            db.commit()
            logger.info(f"Reset notifications for {affected} reminders")
            return affected
        finally:
            db.close()
