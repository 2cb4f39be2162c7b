# activity.py
"""Activity notifications sent by request handlers after a successful write.

These never raise: a failed email must not fail the request that created the
chat, quiz or upload.
"""
import logging

from notifications import NewChat, NewQuiz, NewUpload

logger = logging.getLogger(__name__)


async def _notify(dispatcher, address, payload):
    if not address:
        logger.info(f"No email address, skipping {payload.kind.value} notification")
        return None
    try:
        return await dispatcher.send(address, payload)
    except Exception:
        logger.exception(f"Failed to send {payload.kind.value} notification email")
        return None


async def notify_new_chat(dispatcher, address, title, created_at):
    return await _notify(dispatcher, address, NewChat(title, created_at))


async def notify_new_quiz(dispatcher, address, topic, difficulty, num_questions, source=None):
    return await _notify(dispatcher, address, NewQuiz(topic, difficulty, int(num_questions), source))


async def notify_new_upload(dispatcher, address, filename, size):
    return await _notify(dispatcher, address, NewUpload(filename, size))
