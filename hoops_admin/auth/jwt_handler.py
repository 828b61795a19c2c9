import logging
from datetime import datetime, timezone, timedelta

from fastapi import HTTPException, Depends
from fastapi.security import OAuth2PasswordBearer
from jose import jwt, JWTError

from hoops_admin.config import config

logger = logging.getLogger(__name__)

oauth2_scheme_access = OAuth2PasswordBearer(tokenUrl="auth/google")


def verify_jwt_token(token: str = Depends(oauth2_scheme_access)):
    """
    Verify JWT access token for correctness and expiration time.
    """
    if config.ENVIRONMENT == "dev" and token == "dev_token":
        logger.debug("dev_token accepted")
        return {"email": config.DEV_ADMIN_EMAIL, "role": "ADMIN", "id": 1}

    try:
        payload = jwt.decode(token, config.JWT_SECRET_KEY, algorithms=[config.JWT_ALGORITHM])
    except JWTError as e:
        logger.error(f"JWT verification error: {str(e)}")
        raise HTTPException(status_code=401, detail="Token is invalid or expired")

    exp = payload.get("exp")
    if exp is None:
        raise HTTPException(status_code=401, detail="Missing 'exp' field in token")

    token_exp_time = datetime.fromtimestamp(exp, tz=timezone.utc)
    if token_exp_time < datetime.now(tz=timezone.utc):
        raise HTTPException(status_code=401, detail="Token has expired")

    logger.debug(f"Token payload: {payload}")
    email = payload.get("sub") or payload.get("email")
    return {"email": email, "role": payload.get("role"), "id": payload.get("id")}


def create_access_token(data: dict, expires_delta: timedelta = None) -> str:
    """
    Create a new JWT access token.
    """
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=config.JWT_ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, config.JWT_SECRET_KEY, algorithm=config.JWT_ALGORITHM)


def create_refresh_token(data: dict, expires_delta: timedelta = None) -> str:
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(days=config.JWT_REFRESH_TOKEN_EXPIRE_DAYS))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, config.JWT_SECRET_KEY, algorithm=config.JWT_ALGORITHM)


def refresh_access_token(token: str) -> str:
    """
    Use a refresh token to generate a new access token.
    """
    try:
        payload = jwt.decode(token, config.JWT_SECRET_KEY, algorithms=[config.JWT_ALGORITHM])
    except JWTError as e:
        logger.error(f"Error during refresh token validation: {e}")
        raise HTTPException(status_code=401, detail="Invalid or expired refresh token.")

    exp = payload.get("exp")
    if exp is None or datetime.fromtimestamp(exp, tz=timezone.utc) < datetime.now(tz=timezone.utc):
        raise HTTPException(status_code=401, detail="Refresh token has expired")

    return create_access_token(
        data={"sub": payload.get("sub"), "id": payload.get("id"), "role": payload.get("role")}
    )
