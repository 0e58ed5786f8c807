from datetime import datetime
from typing import Optional

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from src.platform.database.orm_db_setting import Base


class EventModel(Base):
    __tablename__ = 'event'

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default='')
    organizer_id: Mapped[int] = mapped_column(Integer, ForeignKey('user.id'), nullable=False)
    venue_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey('venue.id'), nullable=True, index=True
    )
    start: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    end: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    base_price: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    max_attendees: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    current_attendee_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    status: Mapped[str] = mapped_column(String(20), default='draft', nullable=False)
    version: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )

    __table_args__ = (
        # 0 <= current_attendee_count <= max_attendees
        CheckConstraint(
            'current_attendee_count >= 0 AND '
            '(max_attendees IS NULL OR current_attendee_count <= max_attendees)',
            name='ck_event_attendee_count_bounds',
        ),
        Index('ix_event_venue_window', 'venue_id', 'start', 'end'),
    )
