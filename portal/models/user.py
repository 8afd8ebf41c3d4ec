"""
User Model
"""
from sqlalchemy import Column, DateTime, Integer, String, Text

from portal.database import Base


class User(Base):
    __tablename__ = "users"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    email = Column(String(255), unique=True, index=True, nullable=False)  # stored lower-cased
    password_hash = Column(String(255), nullable=False)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    role = Column(String(20), default="client", nullable=False)
    avatar_initials = Column(String(4), nullable=True)
    avatar_url = Column(String(500), nullable=True)
    company = Column(String(255), nullable=True)
    position = Column(String(255), nullable=True)
    phone = Column(String(50), nullable=True)
    bio = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False)
