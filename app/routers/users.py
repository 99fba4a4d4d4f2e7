# =============================================================================
# app/routers/users.py - User Directory API
# =============================================================================
# JSON endpoints over user accounts. Bearer token required.
# Staff may see and edit everyone; other users only themselves.
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query

from app.auth.dependencies import get_current_staff_user, get_current_user
from app.dependencies import DbDep
from app.exceptions import PermissionDeniedError
from core.models.user import UserList, UserResponse, UserUpdate
from core.services.user_service import UserService
from lib.db_models import User

router = APIRouter()


def _ensure_self_or_staff(actor: User, user_id: int, action: str) -> None:
    if not actor.is_staff and actor.id != user_id:
        raise PermissionDeniedError(action)


@router.get("", response_model=UserList)
def list_users(
    db: DbDep,
    staff: User = Depends(get_current_staff_user),
    page: Annotated[int, Query(ge=1, description="Page number")] = 1,
    page_size: Annotated[int, Query(ge=1, le=100, description="Items per page")] = 20,
    department: Annotated[str | None, Query(description="Filter by department")] = None,
    active: Annotated[bool | None, Query(description="Filter by active flag")] = None,
):
    """
    List users with pagination.

    Staff only.
    """
    users, total = UserService.list_users(
        db,
        page=page,
        page_size=page_size,
        department=department,
        active=active,
    )
    return UserList(
        users=[UserResponse.model_validate(u) for u in users],
        total=total,
        page=page,
        page_size=page_size,
    )


@router.get("/{user_id}", response_model=UserResponse)
def get_user(
    db: DbDep,
    user_id: Annotated[int, Path(description="User id")],
    actor: User = Depends(get_current_user),
):
    """Get one user. Staff, or the user themselves."""
    _ensure_self_or_staff(actor, user_id, "view this user")
    return UserResponse.model_validate(UserService.get_user(db, user_id))


@router.patch("/{user_id}", response_model=UserResponse)
def update_user(
    db: DbDep,
    user_id: Annotated[int, Path(description="User id")],
    request: UserUpdate,
    actor: User = Depends(get_current_user),
):
    """
    Update profile fields.

    Users may edit their own profile; only staff may change
    is_active or is_staff. Nobody can deactivate themselves.
    """
    _ensure_self_or_staff(actor, user_id, "edit this user")
    if request.touches_account_flags and not actor.is_staff:
        raise PermissionDeniedError("change account flags")
    if actor.id == user_id and request.is_active is False:
        raise PermissionDeniedError("deactivate your own account")

    user = UserService.update_user(db, user_id, request)
    return UserResponse.model_validate(user)


@router.delete("/{user_id}", response_model=UserResponse)
def deactivate_user(
    db: DbDep,
    user_id: Annotated[int, Path(description="User id")],
    staff: User = Depends(get_current_staff_user),
):
    """
    Deactivate (soft delete) a user.

    The account is kept but can no longer log in. Staff only.
    """
    if staff.id == user_id:
        raise PermissionDeniedError("deactivate your own account")
    return UserResponse.model_validate(UserService.deactivate_user(db, user_id))
