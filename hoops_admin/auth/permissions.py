"""
Simple role-based authorization for FastAPI endpoints.
"""

from typing import List, Optional
from fastapi import Depends, HTTPException, status

from hoops_admin.auth.jwt_handler import verify_jwt_token
from hoops_admin.auth.policy import ActingContext, Permission
from hoops_admin.models.user import UserRole


def get_current_user(allowed_roles: Optional[List[str]] = None):
    """
    Dependency factory to create a get_current_user dependency with role checking.

    Args:
        allowed_roles: List of role strings that are allowed to access the endpoint.
                      If None, any authenticated user can access.

    Returns:
        A FastAPI dependency returning the ActingContext of the caller

    Example:
        @router.post("/players/{player_id}/package/renew")
        def renew(context: ActingContext = Depends(get_current_user(["ADMIN"]))):
            ...
    """
    def dependency(current_user_data = Depends(verify_jwt_token)) -> ActingContext:
        if not current_user_data:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Authentication required"
            )

        user_role = current_user_data.get("role")
        try:
            role = UserRole(user_role)
        except ValueError:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="User role not found"
            )

        if allowed_roles is not None and role.value not in allowed_roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Access denied. Required roles: {allowed_roles}, your role: {role.value}"
            )

        return ActingContext(
            user_id=current_user_data.get("id"),
            role=role,
            email=current_user_data.get("email"),
        )

    return dependency


def require_permission(permission: Permission):
    """
    Same as get_current_user, but checks the role policy table instead of a role list.
    """
    def dependency(context: ActingContext = Depends(get_current_user())) -> ActingContext:
        if not context.can(permission):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Access denied. Missing permission: {permission.value}"
            )
        return context

    return dependency
