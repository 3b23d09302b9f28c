"""
Admin Auth Service
Credential check, signed tokens backed by server-side sessions, and login rate limiting
"""

import asyncio
import time
from datetime import timedelta
from typing import Optional, Tuple, Callable, Dict

from fastapi import Request
from starlette.concurrency import run_in_threadpool

from lawlens.config.settings import Settings
from lawlens.core.constants import ADMIN_ROLE, SECURITY_HEADERS
from lawlens.core.logging import logger
from lawlens.core.security import (
    create_access_token,
    verify_token as decode_token,
    verify_password,
    constant_time_equals,
    generate_session_id,
    utc_from_timestamp,
)
from lawlens.schemas.auth import AdminUser, AdminSession, RateLimitEntry
from lawlens.services.auth_state import AuthStateStore


class AdminAuth:
    """Admin session authority; all times are epoch seconds from `clock`"""

    def __init__(self, state: AuthStateStore, settings: Settings, clock: Callable[[], float] = time.time):
        self.state = state
        self.settings = settings
        self.clock = clock
        self.session_timeout = settings.ADMIN_SESSION_TIMEOUT_HOURS * 3600
        self.activity_timeout = settings.ADMIN_ACTIVITY_TIMEOUT_HOURS * 3600
        self.max_login_attempts = settings.MAX_LOGIN_ATTEMPTS
        self.lockout_duration = settings.LOGIN_LOCKOUT_MINUTES * 60

    def verify_credentials(self, email: str, password: str) -> bool:
        """Check the submitted credentials against the configured admin account"""
        admin_email = self.settings.ADMIN_EMAIL
        admin_password = self.settings.ADMIN_PASSWORD
        admin_password_hash = self.settings.ADMIN_PASSWORD_HASH

        if not admin_email or not (admin_password or admin_password_hash):
            logger.error("Admin credentials not configured")
            return False

        if not email or not password:
            return False

        email_ok = email == admin_email
        if admin_password_hash:
            password_ok = verify_password(password, admin_password_hash)
        else:
            password_ok = constant_time_equals(password, admin_password)
        return email_ok and password_ok

    def create_session(self, email: str) -> Tuple[str, str]:
        """Store a new session and return (token, session_id)"""
        session_id = generate_session_id()
        login_time = self.clock()

        with self.state.locked():
            self.state.save_session(AdminSession(
                session_id=session_id,
                email=email,
                login_time=login_time,
                last_activity=login_time,
            ))

        token = create_access_token(
            {
                "email": email,
                "role": ADMIN_ROLE,
                "session_id": session_id,
                "login_time": login_time,
            },
            issued_at=utc_from_timestamp(login_time),
            expires_delta=timedelta(seconds=self.session_timeout),
        )
        return token, session_id

    def _is_expired(self, session: AdminSession, now: float) -> Optional[str]:
        if now - session.login_time > self.session_timeout:
            return "Session expired"
        if now - session.last_activity > self.activity_timeout:
            return "Session inactive too long"
        return None

    def verify_token(self, token: Optional[str]) -> Optional[AdminUser]:
        """Admin identity for a token, or None; refreshes the session's activity time"""
        if not token:
            return None

        payload = decode_token(token)
        if not payload:
            logger.info("Admin token verification failed")
            return None

        session_id = payload.get("session_id")
        if not session_id:
            return None

        with self.state.locked():
            session = self.state.get_session(session_id)
            if not session:
                logger.info(f"Session not found: {session_id[:8]}")
                return None

            now = self.clock()
            reason = self._is_expired(session, now)
            if reason:
                logger.info(f"{reason}: {session_id[:8]}")
                self.state.delete_session(session_id)
                return None

            session.last_activity = now
            self.state.save_session(session)

        return AdminUser(
            email=payload.get("email"),
            role=payload.get("role"),
            session_id=session_id,
            login_time=payload.get("login_time"),
        )

    def verify_admin_token(self, request: Request) -> Optional[AdminUser]:
        """Verify the admin cookie of a request"""
        return self.verify_token(request.cookies.get(self.settings.ADMIN_TOKEN_COOKIE))

    def destroy_session(self, session_id: str) -> None:
        with self.state.locked():
            self.state.delete_session(session_id)

    def cleanup_expired_sessions(self) -> int:
        """Drop expired sessions and elapsed rate-limit windows; returns the number of sessions dropped"""
        now = self.clock()
        removed = 0
        with self.state.locked():
            for session_id, session in self.state.list_sessions().items():
                if self._is_expired(session, now):
                    self.state.delete_session(session_id)
                    removed += 1
            for ip, entry in self.state.list_attempts().items():
                if now - entry.last_attempt > self.lockout_duration:
                    self.state.delete_attempts(ip)

        if removed:
            logger.info(f"Removed {removed} expired admin sessions")
        return removed

    def get_active_session_count(self) -> int:
        self.cleanup_expired_sessions()
        return len(self.state.list_sessions())

    def check_rate_limit(self, ip: str) -> bool:
        """Record a login attempt from `ip`; False once the attempt budget is used up"""
        now = self.clock()
        with self.state.locked():
            entry = self.state.get_attempts(ip)

            if not entry or now - entry.last_attempt > self.lockout_duration:
                self.state.save_attempts(ip, RateLimitEntry(count=1, last_attempt=now))
                return True

            if entry.count >= self.max_login_attempts:
                return False

            entry.count += 1
            entry.last_attempt = now
            self.state.save_attempts(ip, entry)
            return True

    @staticmethod
    def get_security_headers() -> Dict[str, str]:
        return dict(SECURITY_HEADERS)


def get_client_ip(request: Request) -> str:
    """First X-Forwarded-For hop, then X-Real-IP, else "unknown" """
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.headers.get("x-real-ip") or "unknown"


async def run_session_sweeper(auth: AdminAuth, interval: int):
    """Periodically sweep expired sessions until cancelled"""
    while True:
        await asyncio.sleep(interval)
        try:
            # blocking: takes the state lock and may wait on Redis
            await run_in_threadpool(auth.cleanup_expired_sessions)
        except Exception as e:
            logger.error(f"Session sweep failed: {e}", exc_info=True)
