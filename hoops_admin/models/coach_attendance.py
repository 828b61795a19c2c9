from datetime import datetime

from sqlalchemy import Column, Integer, ForeignKey, DateTime, UniqueConstraint, Enum as SQLEnum
from sqlalchemy.orm import relationship

from hoops_admin.database import Base
from hoops_admin.models.attendance import AttendanceStatus


class CoachAttendance(Base):
    """Присутствие тренера на сессии и отметки прихода/ухода"""
    __tablename__ = "coach_attendance_records"
    __table_args__ = (UniqueConstraint("session_id", "coach_id", name="uq_coach_attendance_session_coach"),)

    id = Column(Integer, primary_key=True, index=True)
    session_id = Column(
        Integer, ForeignKey("training_sessions.id", ondelete="CASCADE"), nullable=False, index=True
    )
    coach_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    status = Column(SQLEnum(AttendanceStatus), nullable=False, default=AttendanceStatus.PENDING, index=True)
    time_in = Column(DateTime, nullable=True)
    time_out = Column(DateTime, nullable=True)
    marked_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    session = relationship("TrainingSession", back_populates="coach_attendance")
    coach = relationship("User")

    @property
    def coach_name(self):
        return self.coach.name if self.coach else None

    def __repr__(self):
        return f"<CoachAttendance(id={self.id}, coach_id={self.coach_id}, status={self.status})>"
