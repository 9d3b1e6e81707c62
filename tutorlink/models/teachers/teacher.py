from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, Boolean, Numeric, Text
from sqlalchemy.orm import relationship
from datetime import datetime
from tutorlink.cores.db import Base


class Teacher(Base):
    """Perfil de docente; las reservas y disponibilidades apuntan a este id, no al del usuario"""

    __tablename__ = "teachers"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), unique=True, nullable=False, index=True)
    bio = Column(Text, nullable=True)
    subjects = Column(String(255), nullable=True)  # separado por comas
    education = Column(String(255), nullable=True)
    experience_years = Column(Integer, nullable=False, default=0)
    hourly_rate = Column(Numeric(10, 2), nullable=False, default=0)
    # Zona horaria declarada; el cálculo de disponibilidad usa la hora local del servidor
    timezone = Column(String(64), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    user = relationship("User", backref="teacher_profile", lazy="joined")

    def __repr__(self):
        return f"<Teacher(id={self.id}, user_id={self.user_id})>"
