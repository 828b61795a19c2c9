from datetime import datetime
from enum import Enum

from sqlalchemy import Column, Integer, Date, Time, ForeignKey, String, DateTime, Enum as SQLEnum
from sqlalchemy.orm import relationship

from hoops_admin.database import Base


class SessionStatus(str, Enum):
    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class TrainingSession(Base):
    __tablename__ = "training_sessions"

    id = Column(Integer, primary_key=True, index=True)
    date = Column(Date, nullable=False, index=True)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    branch_id = Column(Integer, ForeignKey("branches.id"), nullable=False)
    coach_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    package_type = Column(String, nullable=True)
    notes = Column(String, nullable=True)
    status = Column(SQLEnum(SessionStatus), nullable=False, default=SessionStatus.SCHEDULED)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    branch = relationship("Branch", back_populates="training_sessions")
    coach = relationship("User")
    attendance_records = relationship(
        "AttendanceRecord", back_populates="session", cascade="all, delete-orphan"
    )
    coach_attendance = relationship(
        "CoachAttendance", back_populates="session", cascade="all, delete-orphan"
    )

    def __repr__(self):
        return f"<TrainingSession(id={self.id}, date={self.date}, start_time={self.start_time})>"
