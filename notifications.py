# notifications.py
"""Outbound notifications for reminders and user activity.

There are exactly four kinds of notification. Each has its own payload
dataclass that knows how to render itself; ``Dispatcher.send`` turns a payload
into one transport call and reports the outcome as a ``DispatchResult``.
"""
import datetime
import enum
import logging
import re
from dataclasses import dataclass
from typing import ClassVar, Optional, Union

logger = logging.getLogger(__name__)

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class NotificationKind(str, enum.Enum):
    REMINDER_DUE = "reminder-due"
    NEW_CHAT = "new-chat"
    NEW_QUIZ = "new-quiz"
    NEW_UPLOAD = "new-upload"


class FailureKind(str, enum.Enum):
    INVALID_ADDRESS = "invalid_address"
    TRANSPORT_FAILURE = "transport_failure"
    RATE_LIMITED = "rate_limited"


class DispatchError(Exception):
    failure: ClassVar[FailureKind]


class InvalidAddress(DispatchError):
    failure = FailureKind.INVALID_ADDRESS


class TransportFailure(DispatchError):
    failure = FailureKind.TRANSPORT_FAILURE


class RateLimited(DispatchError):
    failure = FailureKind.RATE_LIMITED


@dataclass(frozen=True)
class Notification:
    """A rendered message, ready for a transport."""
    kind: NotificationKind
    subject: str
    body: str


def _fmt(dt: datetime.datetime) -> str:
    return dt.strftime("%Y-%m-%d %H:%M UTC")


@dataclass(frozen=True)
class ReminderDue:
    kind: ClassVar[NotificationKind] = NotificationKind.REMINDER_DUE
    title: str
    due_at: datetime.datetime

    def render(self) -> Notification:
        return Notification(
            self.kind,
            f"Reminder: {self.title}",
            f"Your reminder \"{self.title}\" is due at {_fmt(self.due_at)}.",
        )


@dataclass(frozen=True)
class NewChat:
    kind: ClassVar[NotificationKind] = NotificationKind.NEW_CHAT
    title: str
    created_at: datetime.datetime

    def render(self) -> Notification:
        return Notification(
            self.kind,
            "New chat started",
            f"You started a new chat \"{self.title}\" at {_fmt(self.created_at)}.",
        )


@dataclass(frozen=True)
class NewQuiz:
    kind: ClassVar[NotificationKind] = NotificationKind.NEW_QUIZ
    topic: str
    difficulty: str
    num_questions: int
    source: Optional[str] = None

    def render(self) -> Notification:
        body = (f"A {self.difficulty} quiz on \"{self.topic}\" with "
                f"{self.num_questions} questions is ready.")
        if self.source:
            body += f" Source: {self.source}."
        return Notification(self.kind, f"New quiz: {self.topic}", body)


@dataclass(frozen=True)
class NewUpload:
    kind: ClassVar[NotificationKind] = NotificationKind.NEW_UPLOAD
    filename: str
    size: int

    def render(self) -> Notification:
        return Notification(
            self.kind,
            f"File uploaded: {self.filename}",
            f"Your file \"{self.filename}\" ({_human_size(self.size)}) was uploaded.",
        )


Payload = Union[ReminderDue, NewChat, NewQuiz, NewUpload]


def _human_size(size: int) -> str:
    for unit in ("B", "KB", "MB"):
        if size < 1024:
            return f"{size:.0f} {unit}" if unit == "B" else f"{size:.1f} {unit}"
        size /= 1024
    return f"{size:.1f} GB"


@dataclass(frozen=True)
class DispatchResult:
    kind: NotificationKind
    address: str
    failure: Optional[FailureKind] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.failure is None


class Dispatcher:
    """Renders a payload and hands it to the transport exactly once. No retries."""

    def __init__(self, transport):
        self.transport = transport

    async def send(self, address: str, payload: Payload) -> DispatchResult:
        kind = payload.kind
        if not address or not EMAIL_RE.match(address):
            logger.warning(f"Not sending {kind.value} notification: invalid address {address!r}")
            return DispatchResult(kind, address, FailureKind.INVALID_ADDRESS, "invalid address")
        notification = payload.render()
        try:
            await self.transport.send(address, notification)
        except DispatchError as e:
            logger.warning(f"Failed to send {kind.value} notification to {address}: {e.failure.value}: {e}")
            return DispatchResult(kind, address, e.failure, str(e))
        logger.info(f"Sent {kind.value} notification to {address}")
        return DispatchResult(kind, address)
