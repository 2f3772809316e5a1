"""
Soft-delete visibility rules shared by every read and write path
"""

from typing import Any, Dict, Optional

from config.lookups import SOFT_DELETE_FIELD
from utils.auth import AuthUser, is_admin
from utils.errors import ForbiddenError


def can_see_deleted(auth_user: Optional[AuthUser], include_soft_deleted: Optional[bool]) -> bool:
    """
    Whether soft-deleted records are visible to the caller.

    Raises:
        ForbiddenError: A non-admin asked for soft-deleted records
    """
    if include_soft_deleted and not is_admin(auth_user):
        raise ForbiddenError("You are not allowed to perform that action")
    return bool(include_soft_deleted)


def is_visible(record: Dict[str, Any], show_deleted: bool) -> bool:
    return show_deleted or not record.get(SOFT_DELETE_FIELD, False)


def sanitize(record: Dict[str, Any]) -> Dict[str, Any]:
    """Copy of ``record`` without the internal soft-delete flag"""
    return {key: value for key, value in record.items() if key != SOFT_DELETE_FIELD}
