"""
Persisted storefront session model.
"""

from sqlalchemy import Column, String, Text, TIMESTAMP, JSON
from sqlalchemy.sql import func

from domain.models.database import Base


class StorefrontSession(Base):
    """Visitor state kept between requests (token, user, cart, chat transcript)"""

    __tablename__ = "storefront_session"

    session_id = Column(String(64), primary_key=True)
    token = Column(Text, nullable=True)
    user = Column(JSON, nullable=True)
    cart = Column(JSON, nullable=False, default=dict)
    chat = Column(JSON, nullable=False, default=list)
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(
        TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()
    )
