# transports.py
import asyncio
import logging
import smtplib
import ssl
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

import aiohttp

import config
from notifications import InvalidAddress, RateLimited, TransportFailure

logger = logging.getLogger(__name__)

# SMTP replies that mean "try again later"
SMTP_RATE_LIMIT_CODES = (421, 450, 451, 452)


class LoggingTransport:
    """Writes notifications to the log instead of sending them."""

    async def send(self, address, notification):
        logger.info(f"[{notification.kind.value}] to={address} subject={notification.subject!r} body={notification.body!r}")


class SmtpTransport:
    def __init__(self, host, port, username=None, password=None, sender=config.MAIL_FROM, use_tls=True):
        if not host:
            raise ValueError("SMTP_HOST is required for the smtp transport")
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.sender = sender
        self.use_tls = use_tls

    async def send(self, address, notification):
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, self._deliver, address, notification)

    def _build_message(self, address, notification):
        msg = MIMEMultipart("alternative")
        msg["Subject"] = notification.subject
        msg["From"] = self.sender
        msg["To"] = address
        msg.attach(MIMEText(notification.body, "plain"))
        return msg

    def _deliver(self, address, notification):
        msg = self._build_message(address, notification)
        try:
            with smtplib.SMTP(self.host, self.port, timeout=30) as server:
                if self.use_tls:
                    server.starttls(context=ssl.create_default_context())
                if self.username and self.password:
                    server.login(self.username, self.password)
                server.sendmail(self.sender, [address], msg.as_string())
        except smtplib.SMTPRecipientsRefused as e:
            raise InvalidAddress(f"recipient refused: {address}") from e
        except smtplib.SMTPResponseException as e:
            if e.smtp_code in SMTP_RATE_LIMIT_CODES:
                raise RateLimited(f"SMTP {e.smtp_code}: {e.smtp_error!r}") from e
            raise TransportFailure(f"SMTP {e.smtp_code}: {e.smtp_error!r}") from e
        except (smtplib.SMTPException, OSError) as e:
            raise TransportFailure(str(e)) from e


class HttpMailTransport:
    """Posts messages as JSON to an HTTP mail API."""

    def __init__(self, api_url, api_key=None, sender=config.MAIL_FROM):
        if not api_url:
            raise ValueError("MAIL_API_URL is required for the http transport")
        self.api_url = api_url
        self.api_key = api_key
        self.sender = sender

    async def send(self, address, notification):
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        data = {
            "from": self.sender,
            "to": [address],
            "subject": notification.subject,
            "text": notification.body,
            "tags": [notification.kind.value],
        }
        try:
            async with aiohttp.ClientSession() as session:
                async with session.post(self.api_url, headers=headers, json=data) as resp:
                    if resp.status == 429:
                        raise RateLimited(f"mail API rate limited: {resp.status}")
                    if resp.status in (400, 422):
                        raise InvalidAddress(f"mail API rejected message: {resp.status} {await resp.text()}")
                    if resp.status >= 300:
                        raise TransportFailure(f"mail API error: {resp.status}")
        except aiohttp.ClientError as e:
            raise TransportFailure(f"mail API request error: {e}") from e


def build_transport():
    if config.MAIL_TRANSPORT == "smtp":
        return SmtpTransport(
            config.SMTP_HOST,
            config.SMTP_PORT,
            username=config.SMTP_USERNAME,
            password=config.SMTP_PASSWORD,
            use_tls=config.SMTP_USE_TLS,
        )
    if config.MAIL_TRANSPORT == "http":
        return HttpMailTransport(config.MAIL_API_URL, api_key=config.MAIL_API_KEY)
    if config.MAIL_TRANSPORT == "log":
        return LoggingTransport()
    raise ValueError(f"Unknown MAIL_TRANSPORT: {config.MAIL_TRANSPORT}")
