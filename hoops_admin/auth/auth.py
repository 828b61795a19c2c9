import logging

from fastapi import APIRouter, HTTPException, Depends, Header
from pydantic import BaseModel
from sqlalchemy.orm import Session

from hoops_admin.auth.jwt_handler import create_access_token, create_refresh_token, refresh_access_token
from hoops_admin.crud.user import get_user_by_email
from hoops_admin.dependencies import get_db
from hoops_admin.utils.google import get_user_info_from_access_token

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])


class RefreshTokenRequest(BaseModel):
    refresh_token: str


class TokensResponse(BaseModel):
    access_token: str
    refresh_token: str


@router.get("/google", response_model=TokensResponse)
def auth_google(authorization: str = Header(...), db: Session = Depends(get_db)):
    """
    Вход через Google: пользователь должен существовать и быть активным.
    """
    user_data = get_user_info_from_access_token(authorization)

    user = get_user_by_email(db, email=user_data["email"])
    if not user or not user.is_active:
        logger.warning(f"Login attempt for unknown or inactive user {user_data['email']}")
        raise HTTPException(status_code=403, detail="Access denied: user not found.")

    claims = {"sub": user.email, "id": user.id, "role": user.role.value}
    logger.info(f"User {user.id} logged in as {user.role.value}")
    return {"access_token": create_access_token(data=claims), "refresh_token": create_refresh_token(data=claims)}


@router.post("/refresh-token", response_model=TokensResponse)
def refresh_token(refresh_token_request: RefreshTokenRequest):
    new_access_token = refresh_access_token(refresh_token_request.refresh_token)
    return {"access_token": new_access_token, "refresh_token": refresh_token_request.refresh_token}
