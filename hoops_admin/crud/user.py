from typing import List, Optional

from sqlalchemy.orm import Session

from hoops_admin.models import User, UserRole
from hoops_admin.schemas.user import CoachCreate, CoachUpdate


def get_user(db: Session, user_id: int) -> Optional[User]:
    return db.query(User).filter(User.id == user_id).first()


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == email.strip().lower()).first()


def get_coaches(db: Session, only_active: bool = False) -> List[User]:
    query = db.query(User).filter(User.role == UserRole.COACH)
    if only_active:
        query = query.filter(User.is_active.is_(True))
    return query.order_by(User.name).all()


def create_coach(db: Session, coach_data: CoachCreate) -> User:
    coach = User(
        name=coach_data.name,
        email=coach_data.email,
        phone=coach_data.phone,
        role=UserRole.COACH,
        is_active=True,
    )
    db.add(coach)
    db.commit()
    db.refresh(coach)
    return coach


def update_coach(db: Session, coach: User, coach_data: CoachUpdate) -> User:
    for key, value in coach_data.model_dump(exclude_unset=True).items():
        setattr(coach, key, value)
    db.commit()
    db.refresh(coach)
    return coach
