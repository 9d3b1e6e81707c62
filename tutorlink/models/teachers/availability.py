from sqlalchemy import Column, Integer, ForeignKey, DateTime, String, Boolean
from sqlalchemy.orm import relationship
from datetime import datetime
from tutorlink.cores.db import Base


class Availability(Base):
    """
    Ventana semanal recurrente del docente.
    day_of_week: 0=Domingo .. 6=Sábado. start_time / end_time: "HH:MM" (hora local).
    """

    __tablename__ = "availabilities"

    id = Column(Integer, primary_key=True, index=True)
    teacher_id = Column(Integer, ForeignKey("teachers.id"), nullable=False, index=True)
    day_of_week = Column(Integer, nullable=False, index=True)
    start_time = Column(String(5), nullable=False)
    end_time = Column(String(5), nullable=False)
    is_available = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)

    teacher = relationship("Teacher", backref="availabilities")

    def __repr__(self):
        return f"<Availability(id={self.id}, teacher_id={self.teacher_id}, day={self.day_of_week}, {self.start_time}-{self.end_time})>"
