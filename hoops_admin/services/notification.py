import logging
from typing import List, Optional

import requests

from hoops_admin.config import config
from hoops_admin.models import TrainingSession, User, Player

logger = logging.getLogger(__name__)


def build_session_notification(
    training_session: TrainingSession,
    coaches: List[User],
    players: List[Player],
) -> dict:
    """Тело запроса к сервису рассылки: дата, время, филиал и состав"""
    return {
        "sessionId": training_session.id,
        "date": training_session.date.isoformat(),
        "startTime": training_session.start_time.strftime("%H:%M"),
        "endTime": training_session.end_time.strftime("%H:%M"),
        "branchName": training_session.branch.name if training_session.branch else None,
        "packageType": training_session.package_type,
        "coachEmails": [coach.email for coach in coaches],
        "coachNames": [coach.name for coach in coaches],
        "studentEmails": [player.email for player in players],
        "studentNames": [player.name for player in players],
    }


class NotificationService:
    """
    Клиент внешнего сервиса email-уведомлений.

    Ошибки доставки логируются и не пробрасываются: уведомление никогда не
    отменяет уже записанную операцию.
    """

    def __init__(self, url: Optional[str] = None, api_key: Optional[str] = None, timeout: Optional[float] = None):
        self.url = config.NOTIFICATION_URL if url is None else url
        self.api_key = config.NOTIFICATION_API_KEY if api_key is None else api_key
        self.timeout = timeout or config.NOTIFICATION_TIMEOUT_SECONDS

    def send_session_notification(self, payload: dict) -> bool:
        if not self.url:
            logger.debug(f"Notification URL is not configured, skipping session {payload.get('sessionId')}")
            return False

        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"

        try:
            response = requests.post(self.url, json=payload, headers=headers, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            logger.error(f"Failed to send notification for session {payload.get('sessionId')}: {e}")
            return False

        logger.info(f"Notification sent for session {payload.get('sessionId')}")
        return True
