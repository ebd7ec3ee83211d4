# streetfood_connect/models/account_model.py
from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, String

from streetfood_connect.database.session import Base


class Account(Base):
    __tablename__ = "accounts"

    uid           = Column(String(64), primary_key=True)
    email         = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    display_name  = Column(String(255))
    disabled      = Column(Boolean, nullable=False, default=False)
    created_at    = Column(DateTime, nullable=False, default=datetime.utcnow)
