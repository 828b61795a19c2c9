import logging

import requests
from fastapi import HTTPException

from hoops_admin.config import config

logger = logging.getLogger(__name__)


def get_user_info_from_access_token(authorization: str) -> dict:
    # Проверка токена через Google userinfo
    access_token = authorization.replace("Bearer ", "").strip()
    try:
        response = requests.get(
            config.GOOGLE_DISCOVERY_URL,
            headers={"Authorization": f"Bearer {access_token}"},
            timeout=config.GOOGLE_TIMEOUT_SECONDS,
        )
    except requests.RequestException as e:
        logger.error(f"Google userinfo request failed: {e}")
        raise HTTPException(status_code=502, detail=f"Error fetching user info: {str(e)}")

    if response.status_code != 200:
        raise HTTPException(status_code=401, detail="Invalid access token")

    user_info = response.json()
    if "email" not in user_info:
        raise HTTPException(status_code=401, detail="Google account has no email")
    return {"email": user_info["email"], "name": user_info.get("name")}
