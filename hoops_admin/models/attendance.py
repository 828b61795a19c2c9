from datetime import datetime
from enum import Enum

from sqlalchemy import Column, Integer, Float, ForeignKey, DateTime, UniqueConstraint, Enum as SQLEnum
from sqlalchemy.orm import relationship

from hoops_admin.database import Base

# Длительность сессии по умолчанию (в часах) - единица списания квоты
DEFAULT_SESSION_DURATION = 1.0


class AttendanceStatus(str, Enum):
    PRESENT = "present"    # Присутствовал, квота списывается
    ABSENT = "absent"      # Не пришел
    PENDING = "pending"    # Ждет отметки


class AttendanceRecord(Base):
    __tablename__ = "attendance_records"
    __table_args__ = (UniqueConstraint("session_id", "player_id", name="uq_attendance_session_player"),)

    id = Column(Integer, primary_key=True, index=True)
    session_id = Column(Integer, ForeignKey("training_sessions.id", ondelete="CASCADE"), nullable=False)
    player_id = Column(Integer, ForeignKey("players.id", ondelete="CASCADE"), nullable=False, index=True)
    status = Column(SQLEnum(AttendanceStatus), nullable=False, default=AttendanceStatus.PENDING)
    session_duration = Column(Float, nullable=True, default=DEFAULT_SESSION_DURATION)
    # Номер цикла пакета; NULL у старых записей - тогда цикл определяется по дате
    package_cycle = Column(Integer, nullable=True, index=True)
    marked_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    session = relationship("TrainingSession", back_populates="attendance_records")
    player = relationship("Player", back_populates="attendance_records")

    @property
    def session_date(self):
        return self.session.date if self.session else None

    def __repr__(self):
        return f"<AttendanceRecord(id={self.id}, player_id={self.player_id}, status={self.status})>"
