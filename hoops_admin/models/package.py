from datetime import datetime
from enum import Enum

from sqlalchemy import Column, Integer, String, Boolean, DateTime

from hoops_admin.database import Base

# Пакеты с этим словом в названии разрешают произвольную длительность сессии
PERSONAL_PACKAGE_MARKER = "personal"


class PackageStatus(str, Enum):
    """Статус пакета; вычисляется, в базе не хранится"""
    ONGOING = "ongoing"
    COMPLETED = "completed"
    EXPIRED = "expired"
    ENDED = "ended"  # Только для архивных циклов, закрытых досрочно


class Package(Base):
    """Справочник типов пакетов (Player.package_type хранит название)"""
    __tablename__ = "packages"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, unique=True, nullable=False)
    description = Column(String, nullable=True)
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, default=datetime.utcnow)


def is_personal_package(package_type: str | None) -> bool:
    return bool(package_type) and PERSONAL_PACKAGE_MARKER in package_type.lower()
