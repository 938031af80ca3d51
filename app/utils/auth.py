# app/utils/auth.py
"""
Authorization guard.

The caller's identity is resolved once per request from the session cookie.
Role predicates take that identity and either hand it back or raise
Forbidden with a generic message, so callers never learn which check failed.
"""

import logging
from typing import Any, Dict, Optional

from fastapi import Depends, Request

from app.config.security import SecurityConfig
from app.models.user import UserRole
from app.schemas.tokens import Identity
from app.utils.errors import Forbidden
from app.utils.security import decode_access_token

logger = logging.getLogger(__name__)

PRIVILEGED_ROLES = {UserRole.ADMIN, UserRole.MANAGER}

# The only task field an employee may change
EMPLOYEE_TASK_FIELDS = {"status"}


def get_current_identity(request: Request) -> Identity:
    token = request.cookies.get(SecurityConfig.COOKIE['name'])
    return decode_access_token(token)


def _deny(identity: Identity) -> Forbidden:
    logger.warning(f"Authorization refused for user {identity.id}")
    return Forbidden()


def require_admin(identity: Identity = Depends(get_current_identity)) -> Identity:
    if identity.role != UserRole.ADMIN:
        raise _deny(identity)
    return identity


def require_manager_or_admin(identity: Identity = Depends(get_current_identity)) -> Identity:
    if identity.role not in PRIVILEGED_ROLES:
        raise _deny(identity)
    return identity


def require_self_or_privileged(identity: Identity, target_user_id: Optional[int]) -> Identity:
    """Pass for managers/admins, or when the caller is the target user"""
    if identity.role in PRIVILEGED_ROLES:
        return identity
    if target_user_id is not None and identity.id == target_user_id:
        return identity
    raise _deny(identity)


def filter_task_update(identity: Identity, changes: Dict[str, Any]) -> Dict[str, Any]:
    """Drop task fields the caller's role may not change.

    Employees may only move the status; other submitted fields are silently
    discarded rather than rejected.
    """
    if identity.role in PRIVILEGED_ROLES:
        return dict(changes)
    dropped = set(changes) - EMPLOYEE_TASK_FIELDS
    if dropped:
        logger.info(f"Ignoring task fields {sorted(dropped)} submitted by employee {identity.id}")
    return {field: value for field, value in changes.items() if field in EMPLOYEE_TASK_FIELDS}
