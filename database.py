# database.py
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base

from config import DB_URL

Base = declarative_base()


def make_session_factory(url=DB_URL):
    connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
    engine = create_engine(url, connect_args=connect_args)
    return sessionmaker(bind=engine, expire_on_commit=False)


SessionLocal = make_session_factory()


def init_db(session_factory=SessionLocal):
    from models import User, Reminder  # noqa
    Base.metadata.create_all(bind=session_factory.kw["bind"])
