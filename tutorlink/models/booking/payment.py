import enum

from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, Enum, Numeric, Text
from sqlalchemy.orm import relationship
from datetime import datetime
from tutorlink.cores.db import Base


class ReceiptStatus(str, enum.Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class Payment(Base):
    """Comprobante de transferencia bancaria enviado por el estudiante y revisado por un admin"""

    __tablename__ = "payments"

    id = Column(Integer, primary_key=True, index=True)
    booking_id = Column(Integer, ForeignKey("bookings.id"), nullable=False, index=True)
    student_id = Column(Integer, ForeignKey("students.id"), nullable=False, index=True)
    transaction_id = Column(String(100), nullable=False)
    amount = Column(Numeric(10, 2), nullable=False)
    payment_date = Column(DateTime, nullable=False)
    bank_name = Column(String(100), nullable=False)
    account_number = Column(String(50), nullable=True)
    receipt_image = Column(String(255), nullable=True)
    notes = Column(Text, nullable=True)
    status = Column(Enum(ReceiptStatus, native_enum=False, length=20), nullable=False, default=ReceiptStatus.PENDING)
    approved_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    approved_at = Column(DateTime(timezone=True), nullable=True)
    rejection_reason = Column(String(255), nullable=True)
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    booking = relationship("Booking", backref="payments", lazy="joined")
    student = relationship("Student", backref="payments")

    def __repr__(self):
        return f"<Payment(id={self.id}, booking_id={self.booking_id}, status={self.status})>"
