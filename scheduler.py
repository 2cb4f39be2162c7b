# scheduler.py
import asyncio
import datetime
import logging
from dataclasses import dataclass

import pytz
from apscheduler.schedulers.asyncio import AsyncIOScheduler

import config
from notifications import ReminderDue
from scanner import find_due_reminders
from timeutils import to_naive_utc, utcnow

logger = logging.getLogger(__name__)

JOB_ID = "reminder_scanner"


@dataclass
class CycleStats:
    scanned: int = 0
    sent: int = 0
    failed: int = 0
    already_notified: int = 0
    aborted: bool = False


class ReminderScheduler:
    """Periodically scans for due reminders, notifies their owners and marks them notified.

    Each reminder is dispatched and then marked with a conditional update, so a
    reminder that another cycle already marked is never sent twice. Cycles are
    serialized: a manual check started mid-cycle waits for the running one.
    """

    def __init__(self, store, dispatcher, scheduler=None,
                 interval_minutes=config.SCAN_INTERVAL_MINUTES,
                 lookahead_minutes=config.LOOKAHEAD_MINUTES,
                 clock=utcnow):
        self.store = store
        self.dispatcher = dispatcher
        self.scheduler = scheduler or AsyncIOScheduler(timezone=pytz.UTC)
        self.interval_minutes = interval_minutes
        self.lookahead = datetime.timedelta(minutes=lookahead_minutes)
        self.clock = clock
        self.running = False
        self._cycle_lock = asyncio.Lock()

    def start(self):
        if self.running:
            logger.info("Reminder scheduler is already running")
            return
        self.scheduler.add_job(
            self.run_cycle_once,
            "interval",
            minutes=self.interval_minutes,
            id=JOB_ID,
            replace_existing=True,
            max_instances=1,
            coalesce=True,
        )
        if not self.scheduler.running:
            self.scheduler.start()
        self.running = True
        logger.info(f"Reminder scheduler started - checking every {self.interval_minutes} minute(s)")

    def stop(self):
        """Stop future ticks. A cycle already in progress runs to completion."""
        if not self.running:
            return
        if self.scheduler.get_job(JOB_ID):
            self.scheduler.remove_job(JOB_ID)
        self.running = False
        logger.info("Reminder scheduler stopped")

    async def run_cycle_once(self):
        async with self._cycle_lock:
            return await self._run_cycle()

    async def _run_cycle(self):
        stats = CycleStats()
        now = to_naive_utc(self.clock())
        try:
            due = find_due_reminders(self.store, now, self.lookahead)
        except Exception:
            logger.exception("Error checking reminders, will retry on next tick")
            stats.aborted = True
            return stats
        if not due:
            return stats

        stats.scanned = len(due)
        logger.info(f"Found {len(due)} upcoming reminder(s) to notify")
        for reminder in due:
            try:
                result = await self.dispatcher.send(
                    reminder.address, ReminderDue(reminder.title, reminder.due_at)
                )
            except Exception:
                logger.exception(f"Failed to send notification for reminder {reminder.id} \"{reminder.title}\"")
                stats.failed += 1
                continue
            if not result.ok:
                logger.warning(f"Notification for reminder {reminder.id} \"{reminder.title}\" failed: {result.failure.value}")
                stats.failed += 1
                continue
            try:
                affected = self.store.mark_notified(reminder.id)
            except Exception:
                logger.exception(f"Sent reminder {reminder.id} but could not mark it notified")
                stats.failed += 1
                continue
            if affected == 0:
                logger.debug(f"Reminder {reminder.id} was already notified or deleted")
                stats.already_notified += 1
                continue
            stats.sent += 1
            logger.info(f"Notification sent for reminder {reminder.id} \"{reminder.title}\"")
        return stats

    async def trigger_manual_check(self):
        logger.info("Manually triggering reminder check")
        return await self.run_cycle_once()

    def reset_all_notifications(self):
        return self.store.reset_notifications()
