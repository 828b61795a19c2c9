from datetime import datetime

from sqlalchemy import Column, Integer, String, Date, Float, ForeignKey, DateTime
from sqlalchemy.orm import relationship, validates

from hoops_admin.database import Base


# Модель игрока (ученика академии)
class Player(Base):
    __tablename__ = "players"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, nullable=False)
    phone = Column(String, nullable=True)
    branch_id = Column(Integer, ForeignKey("branches.id"), nullable=True)  # Филиал зачисления

    # Текущий пакет (живое состояние цикла)
    package_type = Column(String, nullable=True)
    sessions = Column(Float, nullable=True, default=0)  # Квота текущего цикла (в часах)
    remaining_sessions = Column(Float, nullable=False, default=0)  # Производное, всегда в [0, sessions]
    enrollment_date = Column(Date, nullable=True)
    expiration_date = Column(Date, nullable=True)

    # Финансы
    total_training_fee = Column(Float, nullable=True, default=0)
    downpayment = Column(Float, nullable=True, default=0)
    remaining_balance = Column(Float, nullable=True, default=0)  # Производное

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    branch = relationship("Branch", back_populates="players")
    attendance_records = relationship(
        "AttendanceRecord", back_populates="player", cascade="all, delete-orphan"
    )
    package_history = relationship(
        "PackageHistory",
        back_populates="player",
        cascade="all, delete-orphan",
        order_by="PackageHistory.captured_at",
    )
    payments = relationship(
        "PlayerPayment", back_populates="player", cascade="all, delete-orphan"
    )

    @validates("email")
    def validate_email(self, key, value):
        if not value or "@" not in value:
            raise ValueError("Некорректный email")
        return value.strip().lower()

    def has_package_data(self) -> bool:
        """Есть ли у игрока хоть какие-то данные текущего пакета (нужно ли архивировать)"""
        # sessions и remaining_sessions по умолчанию 0
        return bool(self.package_type or self.sessions or self.enrollment_date or self.expiration_date)

    def __repr__(self):
        return f"<Player(id={self.id}, name={self.name}, remaining_sessions={self.remaining_sessions})>"
