"""
Admin Auth API Routes
"""

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import JSONResponse

from lawlens.schemas.auth import AdminLoginRequest
from lawlens.services.auth_service import AdminAuth, get_client_ip
from lawlens.dependencies.auth import get_admin_auth
from lawlens.core.constants import ADMIN_ROLE
from lawlens.core.logging import logger
from lawlens.config.settings import settings

router = APIRouter()


def _set_token_cookie(response: JSONResponse, token: str, max_age: int):
    response.set_cookie(
        key=settings.ADMIN_TOKEN_COOKIE,
        value=token,
        httponly=True,
        secure=settings.is_production,
        samesite="strict",
        max_age=max_age,
        path="/",
    )


@router.post("/login")
def login(
    request_data: AdminLoginRequest,
    request: Request,
    auth: AdminAuth = Depends(get_admin_auth),
):
    """Admin login; sets the session cookie"""
    if not request_data.email or not request_data.password:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Email and password are required")

    client_ip = get_client_ip(request)
    if not auth.check_rate_limit(client_ip):
        logger.warning(f"Admin login rate limited for {client_ip}")
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail=f"Too many login attempts. Please try again in {settings.LOGIN_LOCKOUT_MINUTES} minutes.",
        )

    if not auth.verify_credentials(request_data.email, request_data.password):
        logger.warning(f"Admin login failed from {client_ip}")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")

    try:
        token, session_id = auth.create_session(request_data.email)
        response = JSONResponse({
            "success": True,
            "user": {"email": request_data.email, "role": ADMIN_ROLE},
            "sessionInfo": {
                "sessionId": session_id[:8],
                "activeSessions": auth.get_active_session_count(),
            },
        })
    except Exception as e:
        logger.error(f"Admin login error: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Login failed")

    response.headers.update(auth.get_security_headers())
    _set_token_cookie(response, token, settings.ADMIN_SESSION_TIMEOUT_HOURS * 3600)

    logger.info(f"Admin login successful for {request_data.email} from {client_ip}")
    return response


@router.delete("/login")
def logout(request: Request, auth: AdminAuth = Depends(get_admin_auth)):
    """Admin logout; destroys the session and clears the cookie"""
    admin_user = auth.verify_admin_token(request)
    if admin_user:
        auth.destroy_session(admin_user.session_id)
        logger.info(f"Admin logout: {admin_user.email}")

    response = JSONResponse({"success": True, "message": "Logged out successfully"})
    _set_token_cookie(response, "", 0)
    return response
