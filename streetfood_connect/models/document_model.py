# streetfood_connect/models/document_model.py
from datetime import datetime

from sqlalchemy import Column, DateTime, JSON, PrimaryKeyConstraint, String

from streetfood_connect.database.session import Base


class Document(Base):
    """One document of the local document store; `data` holds the fields."""
    __tablename__ = "documents"

    collection = Column(String(64), nullable=False, index=True)
    id         = Column(String(64), nullable=False)
    data       = Column(JSON, nullable=False, default=dict)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (PrimaryKeyConstraint("collection", "id"),)
