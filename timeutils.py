# timeutils.py
import datetime

import pytz


def utcnow():
    """Current time as a naive UTC datetime, the form stored in the database."""
    return datetime.datetime.now(pytz.UTC).replace(tzinfo=None)


def to_naive_utc(dt):
    if dt.tzinfo is not None:
        dt = dt.astimezone(pytz.UTC).replace(tzinfo=None)
    return dt
