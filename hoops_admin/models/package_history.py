from datetime import datetime
from enum import Enum

from sqlalchemy import Column, Integer, String, Date, Float, ForeignKey, DateTime
from sqlalchemy.orm import relationship

from hoops_admin.database import Base


class RenewalReason(str, Enum):
    """Причины архивации пакета при продлении"""
    EXPIRED = "renewal - expired"
    COMPLETED = "renewal - completed"
    EARLY = "renewal - early"


class PackageHistory(Base):
    """Неизменяемый снимок пакета игрока на момент продления"""
    __tablename__ = "player_package_history"

    id = Column(Integer, primary_key=True, index=True)
    player_id = Column(Integer, ForeignKey("players.id", ondelete="CASCADE"), nullable=False, index=True)
    package_type = Column(String, nullable=True)
    sessions = Column(Float, nullable=True)
    remaining_sessions = Column(Float, nullable=True)
    enrollment_date = Column(Date, nullable=True)
    expiration_date = Column(Date, nullable=True)
    captured_at = Column(DateTime, nullable=False, default=datetime.utcnow, index=True)
    reason = Column(String, nullable=True)

    player = relationship("Player", back_populates="package_history")

    def __repr__(self):
        return f"<PackageHistory(id={self.id}, player_id={self.player_id}, reason={self.reason})>"
