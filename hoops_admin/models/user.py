from datetime import datetime
from enum import Enum as PyEnum

from sqlalchemy import Column, Integer, String, Boolean, DateTime, Enum
from sqlalchemy.orm import validates

from hoops_admin.database import Base


# Роли пользователей
class UserRole(str, PyEnum):
    ADMIN = "ADMIN"
    COACH = "COACH"


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, nullable=False)  # Уникальный Email
    phone = Column(String, nullable=True)
    role = Column(Enum(UserRole), nullable=False)  # Роль ("ADMIN", "COACH")
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    # Валидация: email всегда храним в нижнем регистре
    @validates("email")
    def validate_email(self, key, value):
        if not value or "@" not in value:
            raise ValueError("Некорректный email")
        return value.strip().lower()

    def __repr__(self):
        return f"<User(id={self.id}, email={self.email}, role={self.role})>"
