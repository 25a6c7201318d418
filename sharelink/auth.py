"""Admin authentication via request headers."""

import secrets

from fastapi import HTTPException, Request

from sharelink import config


def is_admin(request: Request) -> bool:
    """Check the X-Admin-User / X-Admin-Pass headers.

    With no admin credentials configured the admin API stays closed.
    """
    if not config.ADMIN_ENABLED:
        return False

    user = request.headers.get("X-Admin-User", "")
    password = request.headers.get("X-Admin-Pass", "")
    if not (user and password):
        return False

    return (
        secrets.compare_digest(user, config.SHARELINK_ADMIN_USER)
        and secrets.compare_digest(password, config.SHARELINK_ADMIN_PASS)
    )


def require_admin(request: Request) -> None:
    if not is_admin(request):
        raise HTTPException(status_code=401, detail="Admin access required")
