# config.py
import os

from dotenv import load_dotenv

load_dotenv()

DB_URL = os.getenv("DB_URL", "sqlite:///reminders.db")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Scheduler cadence and lookahead window
SCAN_INTERVAL_MINUTES = int(os.getenv("SCAN_INTERVAL_MINUTES", "1"))
LOOKAHEAD_MINUTES = int(os.getenv("LOOKAHEAD_MINUTES", "5"))

# Outbound mail: "smtp", "http" or "log"
MAIL_TRANSPORT = os.getenv("MAIL_TRANSPORT", "log")
MAIL_FROM = os.getenv("MAIL_FROM", "no-reply@timelyhub.local")

SMTP_HOST = os.getenv("SMTP_HOST")
SMTP_PORT = int(os.getenv("SMTP_PORT", "587"))
SMTP_USERNAME = os.getenv("SMTP_USERNAME")
SMTP_PASSWORD = os.getenv("SMTP_PASSWORD")
SMTP_USE_TLS = os.getenv("SMTP_USE_TLS", "true").lower() in ("1", "true", "yes")

MAIL_API_URL = os.getenv("MAIL_API_URL")
MAIL_API_KEY = os.getenv("MAIL_API_KEY")
