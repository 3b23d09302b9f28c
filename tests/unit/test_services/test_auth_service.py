"""
Test Admin Auth Service
"""

import asyncio
import threading
from contextlib import suppress
from types import SimpleNamespace

from jose import jwt
from lawlens.config.settings import settings
from lawlens.core.security import ALGORITHM, get_password_hash
from lawlens.services.auth_service import AdminAuth, get_client_ip, run_session_sweeper
from lawlens.services.auth_state import MemoryAuthStateStore

HOUR = 3600


def _settings(**overrides):
    return settings.model_copy(update=overrides)


def _request(headers=None, cookies=None):
    return SimpleNamespace(headers=headers or {}, cookies=cookies or {})


def test_verify_credentials(admin_auth):
    assert admin_auth.verify_credentials(settings.ADMIN_EMAIL, settings.ADMIN_PASSWORD) is True
    assert admin_auth.verify_credentials(settings.ADMIN_EMAIL, "wrong") is False
    assert admin_auth.verify_credentials("other@lawlens.test", settings.ADMIN_PASSWORD) is False
    assert admin_auth.verify_credentials(settings.ADMIN_EMAIL.upper(), settings.ADMIN_PASSWORD) is False


def test_verify_credentials_unconfigured(fake_clock):
    auth = AdminAuth(MemoryAuthStateStore(), _settings(ADMIN_EMAIL=None), clock=fake_clock)
    assert auth.verify_credentials("admin@lawlens.test", "anything") is False

    auth = AdminAuth(MemoryAuthStateStore(), _settings(ADMIN_PASSWORD=None, ADMIN_PASSWORD_HASH=None), clock=fake_clock)
    assert auth.verify_credentials(settings.ADMIN_EMAIL, settings.ADMIN_PASSWORD) is False


def test_verify_credentials_with_bcrypt_hash(fake_clock):
    hashed = get_password_hash("s3cret-hash")
    auth = AdminAuth(
        MemoryAuthStateStore(),
        _settings(ADMIN_PASSWORD=None, ADMIN_PASSWORD_HASH=hashed),
        clock=fake_clock,
    )
    assert auth.verify_credentials(settings.ADMIN_EMAIL, "s3cret-hash") is True
    assert auth.verify_credentials(settings.ADMIN_EMAIL, "s3cret") is False


def test_create_session_token_claims(admin_auth, fake_clock):
    token, session_id = admin_auth.create_session(settings.ADMIN_EMAIL)

    assert len(session_id) == 64
    payload = jwt.decode(
        token,
        settings.SECRET_KEY,
        algorithms=[ALGORITHM],
        audience="lawlens-app",
        issuer="lawlens-admin",
    )
    assert payload["email"] == settings.ADMIN_EMAIL
    assert payload["role"] == "admin"
    assert payload["session_id"] == session_id
    assert payload["exp"] - payload["iat"] == 24 * HOUR

    session = admin_auth.state.get_session(session_id)
    assert session.login_time == session.last_activity == fake_clock.now


def test_session_ids_are_unique(admin_auth):
    ids = {admin_auth.create_session(settings.ADMIN_EMAIL)[1] for _ in range(20)}
    assert len(ids) == 20


def test_verify_token_success_refreshes_activity(admin_auth, fake_clock):
    token, session_id = admin_auth.create_session(settings.ADMIN_EMAIL)
    fake_clock.advance(HOUR)

    user = admin_auth.verify_token(token)

    assert user is not None
    assert user.email == settings.ADMIN_EMAIL
    assert user.role == "admin"
    assert user.session_id == session_id
    assert admin_auth.state.get_session(session_id).last_activity == fake_clock.now


def test_verify_admin_token_reads_cookie(admin_auth):
    token, _ = admin_auth.create_session(settings.ADMIN_EMAIL)
    assert admin_auth.verify_admin_token(_request(cookies={"admin_token": token})) is not None
    assert admin_auth.verify_admin_token(_request()) is None


def test_verify_token_rejects_bad_tokens(admin_auth):
    assert admin_auth.verify_token(None) is None
    assert admin_auth.verify_token("") is None
    assert admin_auth.verify_token("not-a-token") is None

    forged = jwt.encode(
        {"email": "x", "role": "admin", "session_id": "abc", "iss": "lawlens-admin", "aud": "lawlens-app"},
        "another-secret",
        algorithm=ALGORITHM,
    )
    assert admin_auth.verify_token(forged) is None


def test_verify_token_rejects_wrong_audience(admin_auth, fake_clock):
    token = jwt.encode(
        {"email": "x", "role": "admin", "session_id": "abc", "iss": "lawlens-admin",
         "aud": "someone-else", "exp": int(fake_clock.now) + HOUR},
        settings.SECRET_KEY,
        algorithm=ALGORITHM,
    )
    assert admin_auth.verify_token(token) is None


def test_verify_token_requires_live_session(admin_auth):
    token, session_id = admin_auth.create_session(settings.ADMIN_EMAIL)
    admin_auth.destroy_session(session_id)
    assert admin_auth.verify_token(token) is None


def test_idle_session_expires_and_is_removed(admin_auth, fake_clock):
    token, session_id = admin_auth.create_session(settings.ADMIN_EMAIL)
    assert admin_auth.verify_token(token) is not None

    fake_clock.advance(4 * HOUR + 1)

    assert admin_auth.verify_token(token) is None
    assert admin_auth.state.get_session(session_id) is None


def test_activity_just_under_idle_limit_keeps_session(admin_auth, fake_clock):
    token, _ = admin_auth.create_session(settings.ADMIN_EMAIL)
    for _ in range(5):
        fake_clock.advance(4 * HOUR - 60)
        assert admin_auth.verify_token(token) is not None


def test_absolute_expiry_despite_recent_activity(admin_auth, fake_clock):
    token, session_id = admin_auth.create_session(settings.ADMIN_EMAIL)
    for _ in range(8):
        fake_clock.advance(3 * HOUR)
        assert admin_auth.verify_token(token) is not None

    fake_clock.advance(HOUR)  # 25 hours after login, last activity 1 hour ago

    assert admin_auth.verify_token(token) is None
    assert admin_auth.state.get_session(session_id) is None


def test_destroy_session_is_idempotent(admin_auth):
    _, session_id = admin_auth.create_session(settings.ADMIN_EMAIL)
    admin_auth.destroy_session(session_id)
    admin_auth.destroy_session(session_id)
    admin_auth.destroy_session("never-existed")
    assert admin_auth.state.get_session(session_id) is None


def test_cleanup_removes_expired_sessions(admin_auth, fake_clock):
    admin_auth.create_session(settings.ADMIN_EMAIL)
    fake_clock.advance(5 * HOUR)
    token, fresh_id = admin_auth.create_session(settings.ADMIN_EMAIL)

    assert admin_auth.cleanup_expired_sessions() == 1
    assert list(admin_auth.state.list_sessions()) == [fresh_id]
    assert admin_auth.get_active_session_count() == 1


def test_cleanup_sweeps_elapsed_rate_limit_entries(admin_auth, fake_clock):
    admin_auth.check_rate_limit("10.0.0.1")
    fake_clock.advance(10 * 60)
    admin_auth.check_rate_limit("10.0.0.2")
    fake_clock.advance(6 * 60)

    admin_auth.cleanup_expired_sessions()

    assert set(admin_auth.state.list_attempts()) == {"10.0.0.2"}


def test_rate_limit_allows_five_attempts_per_window(admin_auth, fake_clock):
    ip = "203.0.113.7"
    assert [admin_auth.check_rate_limit(ip) for _ in range(5)] == [True] * 5
    assert admin_auth.check_rate_limit(ip) is False
    assert admin_auth.check_rate_limit("203.0.113.8") is True

    fake_clock.advance(15 * 60 + 1)

    assert admin_auth.check_rate_limit(ip) is True
    assert admin_auth.state.get_attempts(ip).count == 1


def test_denied_attempts_do_not_extend_lockout(admin_auth, fake_clock):
    ip = "203.0.113.9"
    for _ in range(5):
        admin_auth.check_rate_limit(ip)
    fake_clock.advance(10 * 60)
    assert admin_auth.check_rate_limit(ip) is False
    fake_clock.advance(5 * 60 + 1)
    assert admin_auth.check_rate_limit(ip) is True


def test_rate_limit_is_atomic_under_threads(admin_auth):
    ip = "198.51.100.1"
    results = []
    lock = threading.Lock()

    def attempt():
        allowed = admin_auth.check_rate_limit(ip)
        with lock:
            results.append(allowed)

    threads = [threading.Thread(target=attempt) for _ in range(50)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert results.count(True) == 5


def test_security_headers():
    headers = AdminAuth.get_security_headers()
    assert headers["X-Frame-Options"] == "DENY"
    assert headers["X-Content-Type-Options"] == "nosniff"
    assert headers["X-XSS-Protection"] == "1; mode=block"
    assert headers["Referrer-Policy"] == "strict-origin-when-cross-origin"
    assert headers["Content-Security-Policy"].startswith("default-src 'self'")


def test_get_client_ip():
    assert get_client_ip(_request({"x-forwarded-for": "1.2.3.4, 10.0.0.1", "x-real-ip": "9.9.9.9"})) == "1.2.3.4"
    assert get_client_ip(_request({"x-real-ip": "9.9.9.9"})) == "9.9.9.9"
    assert get_client_ip(_request()) == "unknown"


def test_session_sweeper_removes_expired_sessions(admin_auth, fake_clock):
    _, stale_id = admin_auth.create_session(settings.ADMIN_EMAIL)
    fake_clock.advance(5 * HOUR)

    async def sweep_briefly():
        sweeper = asyncio.create_task(run_session_sweeper(admin_auth, 0))
        for _ in range(100):
            await asyncio.sleep(0.01)
            if admin_auth.state.get_session(stale_id) is None:
                break
        sweeper.cancel()
        with suppress(asyncio.CancelledError):
            await sweeper

    asyncio.run(sweep_briefly())

    assert admin_auth.state.get_session(stale_id) is None


def test_session_sweeper_waits_for_state_lock_off_the_event_loop(admin_auth):
    held = threading.Event()
    release = threading.Event()

    def hold_lock():
        with admin_auth.state.locked():
            held.set()
            release.wait(2)

    holder = threading.Thread(target=hold_lock)
    holder.start()
    assert held.wait(1)

    async def measure_lag():
        loop = asyncio.get_running_loop()
        started = loop.time()
        sweeper = asyncio.create_task(run_session_sweeper(admin_auth, 0))
        await asyncio.sleep(0.05)
        lag = loop.time() - started - 0.05
        release.set()
        sweeper.cancel()
        with suppress(asyncio.CancelledError):
            await sweeper
        return lag

    try:
        lag = asyncio.run(measure_lag())
    finally:
        release.set()
        holder.join()

    assert lag < 0.5
