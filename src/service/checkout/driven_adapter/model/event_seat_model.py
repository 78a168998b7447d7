from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import DateTime, Index, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from src.platform.database.orm_db_setting import Base


class EventSeatModel(Base):
    __tablename__ = 'event_seats'
    __table_args__ = (Index('ix_event_seats_status_lock_expires_at', 'status', 'lock_expires_at'),)

    event_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    seat_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    ticket_tier_id: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default='available')
    lock_expires_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    order_id: Mapped[Optional[UUID]] = mapped_column(Uuid, nullable=True, index=True)
