# main.py
import asyncio
import logging

import config
from database import init_db
from notifications import Dispatcher
from scheduler import ReminderScheduler
from store import ReminderStore
from transports import build_transport

# --- Logging ---
logging.basicConfig(
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    level=getattr(logging, config.LOG_LEVEL.upper(), logging.INFO)
)
logger = logging.getLogger(__name__)


async def main():
    init_db()
    dispatcher = Dispatcher(build_transport())
    reminder_scheduler = ReminderScheduler(ReminderStore(), dispatcher)
    reminder_scheduler.start()
    logger.info(f"Notification service started (transport={config.MAIL_TRANSPORT}).")
    try:
        await asyncio.Event().wait()
    finally:
        reminder_scheduler.stop()
        reminder_scheduler.scheduler.shutdown(wait=False)


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Notification service stopped by user.")
    except Exception as e:
        logger.error(f"Notification service crashed: {e}")
        raise
