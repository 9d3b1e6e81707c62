import enum

from sqlalchemy import Column, Integer, String, Boolean, DateTime, Enum
from datetime import datetime
from tutorlink.cores.db import Base


class VerificationPurpose(str, enum.Enum):
    EMAIL_VERIFICATION = "email_verification"
    PASSWORD_RESET = "password_reset"


class VerificationCode(Base):
    """Código de un solo uso enviado por correo; solo hay uno vigente por email y propósito."""
    __tablename__ = "verification_codes"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(120), index=True, nullable=False)
    purpose = Column(Enum(VerificationPurpose), nullable=False)
    code = Column(String(6), nullable=False)
    used = Column(Boolean, default=False, nullable=False)
    attempts = Column(Integer, default=0, nullable=False)
    last_attempt = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)
    expires_at = Column(DateTime(timezone=True), nullable=False)

    def __repr__(self):
        return f"<VerificationCode(email={self.email}, purpose={self.purpose}, used={self.used})>"
