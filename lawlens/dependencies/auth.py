"""
Admin Authentication Dependencies
"""

from fastapi import Depends, HTTPException, Request, status

from lawlens.schemas.auth import AdminUser
from lawlens.services.auth_service import AdminAuth


def get_admin_auth(request: Request) -> AdminAuth:
    """The application's AdminAuth, built in the lifespan"""
    return request.app.state.admin_auth


def require_admin(request: Request, auth: AdminAuth = Depends(get_admin_auth)) -> AdminUser:
    """Verified admin for the request's cookie; 401 otherwise"""
    admin_user = auth.verify_admin_token(request)
    if not admin_user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
    return admin_user
