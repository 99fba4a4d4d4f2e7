# =============================================================================
# app/routers/admin.py - Staff Admin Pages
# =============================================================================
# Minimal user administration for staff accounts:
#   GET  /admin/                               user list (department filter, paging)
#   POST /admin/users/{user_id}/toggle-active  activate / deactivate
# =============================================================================

import logging
from typing import Annotated
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, Form, Path, Query, Request, status
from fastapi.responses import RedirectResponse

from app.auth.csrf import verify_csrf
from app.auth.sessions import staff_required
from app.dependencies import DbDep
from app.exceptions import PermissionDeniedError
from app.templating import render
from core.services.user_service import UserService
from lib.db_models import User

logger = logging.getLogger(__name__)

router = APIRouter()

PAGE_SIZE = 25


@router.get("/", name="admin_index")
def admin_index(
    request: Request,
    db: DbDep,
    staff: User = Depends(staff_required),
    department: Annotated[str | None, Query()] = None,
    page: Annotated[int, Query(ge=1)] = 1,
):
    """User list for staff."""
    department = department or None
    users, total = UserService.list_users(db, page=page, page_size=PAGE_SIZE, department=department)
    return render(request, "admin/users.html", {
        "user": staff,
        "users": users,
        "total": total,
        "page": page,
        "has_next": page * PAGE_SIZE < total,
        "department": department or "",
        "departments": UserService.list_departments(db),
    })


@router.post("/users/{user_id}/toggle-active")
def toggle_active(
    request: Request,
    db: DbDep,
    user_id: Annotated[int, Path()],
    staff: User = Depends(staff_required),
    csrf_token: Annotated[str, Form()] = "",
    department: Annotated[str, Form()] = "",
):
    """Flip a user's is_active flag, then go back to the list."""
    verify_csrf(request, csrf_token)

    if staff.id == user_id:
        raise PermissionDeniedError("deactivate your own account")

    target = UserService.get_user(db, user_id)
    UserService.set_active(db, user_id, not target.is_active)
    logger.info(f"Staff {staff.id} set user {user_id} active={target.is_active}")

    url = "/admin/"
    if department:
        url = f"{url}?{urlencode({'department': department})}"
    return RedirectResponse(url, status_code=status.HTTP_303_SEE_OTHER)
