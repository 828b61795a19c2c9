"""
Права ролей: какие операции может выполнять каждая роль.

ROLE_PERMISSIONS сопоставляет роль с набором Permission; эндпоинты проверяют
право через require_permission, сервисы - через ActingContext.can().
"""
from dataclasses import dataclass
from enum import Enum

from hoops_admin.models.user import UserRole


class Permission(str, Enum):
    VIEW_RECORDS = "VIEW_RECORDS"
    CREATE_PLAYERS = "CREATE_PLAYERS"
    DELETE_PLAYERS = "DELETE_PLAYERS"
    SET_INITIAL_SESSIONS = "SET_INITIAL_SESSIONS"
    MANAGE_PACKAGES = "MANAGE_PACKAGES"
    MANAGE_PAYMENTS = "MANAGE_PAYMENTS"
    MARK_ATTENDANCE = "MARK_ATTENDANCE"
    MANAGE_SESSIONS = "MANAGE_SESSIONS"
    MANAGE_CATALOG = "MANAGE_CATALOG"
    MANAGE_COACHES = "MANAGE_COACHES"


ROLE_PERMISSIONS: dict[UserRole, frozenset[Permission]] = {
    UserRole.ADMIN: frozenset(Permission),
    UserRole.COACH: frozenset({
        Permission.VIEW_RECORDS,
        Permission.CREATE_PLAYERS,
        Permission.MARK_ATTENDANCE,
        Permission.MANAGE_SESSIONS,
    }),
}


@dataclass(frozen=True)
class ActingContext:
    """Кто выполняет операцию. Передается в сервисы явно, без глобального состояния."""
    user_id: int | None
    role: UserRole
    email: str | None = None

    def can(self, permission: Permission) -> bool:
        return permission in ROLE_PERMISSIONS.get(self.role, frozenset())

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN
