import uuid

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base

COLOR_SCHEMES = ("light", "dark", "blue", "green")


def generate_request_id():
    """Generate a unique ID for a shift exchange request"""
    return str(uuid.uuid4())


class Profile(Base):
    __tablename__ = "profiles"

    # Same value as the identity provider's account id (token "sub")
    id = Column(String(128), primary_key=True, index=True)
    email = Column(String(255), nullable=True)
    first_name = Column(String(255), nullable=True)
    last_name = Column(String(255), nullable=True)
    is_admin = Column(Boolean, default=False, nullable=False)
    chat_rating = Column(Integer, default=0, nullable=False)  # 0..5 stars
    color_scheme = Column(String(20), default="light", nullable=False)
    # [{"date": "YYYY-MM-DD", "start": "HH:MM", "end": "HH:MM"}, ...]
    work_schedule = Column(JSON, default=list, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    questions = relationship("Question", back_populates="author")


class Question(Base):
    """A knowledge-base topic; topics with a parent are sub-topics on that parent's board"""

    __tablename__ = "questions"

    id = Column(Integer, primary_key=True, index=True)
    content = Column(Text, nullable=False)
    description = Column(Text, default="", nullable=False)
    parent_id = Column(
        Integer, ForeignKey("questions.id", ondelete="CASCADE"), nullable=True, index=True
    )
    user_id = Column(String(128), ForeignKey("profiles.id"), nullable=True)
    has_form = Column(Boolean, default=False, nullable=False)
    form_fields = Column(JSON, default=list, nullable=False)
    answer_template = Column(Text, default="", nullable=False)
    image_url = Column(String(1024), nullable=True)
    image_positioning = Column(JSON, nullable=True)
    board_position = Column(JSON, nullable=True)  # {"x", "y", "width", "height"}
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)

    author = relationship("Profile", back_populates="questions")


class ShiftExchangeRequest(Base):
    __tablename__ = "shift_exchange_requests"

    id = Column(String(36), primary_key=True, default=generate_request_id)
    requester_id = Column(String(128), ForeignKey("profiles.id"), nullable=False, index=True)
    target_user_id = Column(String(128), ForeignKey("profiles.id"), nullable=False, index=True)
    requester_date = Column(Date, nullable=False)
    target_date = Column(Date, nullable=False)
    # Snapshots of the two schedule entries at request time
    requester_shift = Column(JSON, nullable=False)
    target_shift = Column(JSON, nullable=False)
    status = Column(String(20), default="pending", nullable=False)  # pending, approved, rejected, cancelled
    message = Column(Text, nullable=True)
    admin_notified = Column(Boolean, default=False, nullable=False)
    user_approved = Column(Boolean, default=False, nullable=False)
    admin_approved = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    requester = relationship("Profile", foreign_keys=[requester_id])
    target_user = relationship("Profile", foreign_keys=[target_user_id])
