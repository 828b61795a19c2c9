import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from hoops_admin.auth.permissions import require_permission
from hoops_admin.auth.policy import ActingContext, Permission
from hoops_admin.crud import user as crud_user
from hoops_admin.dependencies import get_db
from hoops_admin.models import UserRole
from hoops_admin.schemas.user import CoachCreate, CoachUpdate, UserResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/coaches", tags=["Coaches"])


@router.get("/", response_model=List[UserResponse])
def get_coaches(
    only_active: bool = False,
    current_user: ActingContext = Depends(require_permission(Permission.VIEW_RECORDS)),
    db: Session = Depends(get_db),
):
    return crud_user.get_coaches(db, only_active=only_active)


@router.post("/", response_model=UserResponse, status_code=201)
def create_coach(
    coach_data: CoachCreate,
    current_user: ActingContext = Depends(require_permission(Permission.MANAGE_COACHES)),
    db: Session = Depends(get_db),
):
    if crud_user.get_user_by_email(db, coach_data.email):
        raise HTTPException(status_code=400, detail=f"User with email {coach_data.email} already exists")
    coach = crud_user.create_coach(db, coach_data)
    logger.info(f"Coach {coach.id} created by user {current_user.user_id}")
    return coach


@router.get("/me", response_model=UserResponse)
def get_me(
    current_user: ActingContext = Depends(require_permission(Permission.VIEW_RECORDS)),
    db: Session = Depends(get_db),
):
    user = crud_user.get_user(db, current_user.user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


@router.patch("/{coach_id}", response_model=UserResponse)
def update_coach(
    coach_id: int,
    coach_data: CoachUpdate,
    current_user: ActingContext = Depends(require_permission(Permission.MANAGE_COACHES)),
    db: Session = Depends(get_db),
):
    coach = crud_user.get_user(db, coach_id)
    if not coach or coach.role != UserRole.COACH:
        raise HTTPException(status_code=404, detail="Coach not found")
    return crud_user.update_coach(db, coach, coach_data)
