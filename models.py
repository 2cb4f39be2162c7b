# models.py
from sqlalchemy import Column, Integer, String, DateTime, Boolean, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from database import Base


class User(Base):
    __tablename__ = "users"
    id = Column(Integer, primary_key=True)
    email = Column(String, index=True)   # contact address for notifications
    full_name = Column(String)
    created_at = Column(DateTime, server_default=func.now())


class Reminder(Base):
    __tablename__ = "reminders"
    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), index=True)
    title = Column(String, nullable=False)
    due_at = Column(DateTime, nullable=False, index=True)   # naive UTC
    notified = Column(Boolean, nullable=True)   # unset until the scheduler delivers it
    created_at = Column(DateTime, server_default=func.now())

    user = relationship(User, lazy="joined")
