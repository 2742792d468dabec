"""
SQLAlchemy ORM models.

Tables
------
* ``payment_notifications`` -- one row per deposit, written when the
  deposit is opened and updated when the gateway verifies or rejects it.

Indexes
-------
* **Unique B-Tree** on ``transaction_id`` (verification look-up).
* **B-Tree** on ``status`` and ``user_id`` for admin review queues.
"""

from sqlalchemy import JSON, Column, DateTime, Index, Integer, String, func

from .database import Base
from driverdesk.domain.enums import PaymentStatus


class PaymentNotificationModel(Base):
    __tablename__ = "payment_notifications"

    id = Column(Integer, primary_key=True, autoincrement=True)
    payment_type = Column(String(32), nullable=False)
    amount = Column(Integer, nullable=False)
    status = Column(String(16), default=PaymentStatus.PENDING.value, nullable=False)
    transaction_id = Column(String(64), unique=True, nullable=False)
    user_id = Column(String(64), nullable=True)
    details = Column(JSON, nullable=True)

    timestamp = Column(DateTime(timezone=True), server_default=func.now())
    verified_at = Column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        Index("idx_payment_notifications_status", "status"),
        Index("idx_payment_notifications_user", "user_id"),
    )
