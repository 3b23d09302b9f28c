"""
Test Core Utilities
"""

import importlib
import logging
import typing
from pathlib import Path
from datetime import datetime, timedelta, timezone

import pytest
from lawlens.core.exceptions import ErrorCode
from lawlens.core.logging import SensitiveFieldFilter
from lawlens.core.security import (
    constant_time_equals,
    create_access_token,
    generate_session_id,
    get_password_hash,
    verify_password,
    verify_token,
)
from lawlens.core.validators import validate_decision_text, validate_email, validate_search_query


@pytest.mark.parametrize("query,expected", [
    (None, "Query parameter is required"),
    ("", "Query parameter is required"),
    (" a ", "Query must be at least 2 characters long"),
    ("ok", None),
    ("x" * 500, None),
    ("x" * 501, "Query is too long"),
])
def test_validate_search_query(query, expected):
    assert validate_search_query(query) == expected


@pytest.mark.parametrize("text,ok", [
    (None, False),
    (42, False),
    ("  short   ", False),
    ("a" * 10, True),
    ("a" * 500, True),
    ("a" * 501, False),
])
def test_validate_decision_text(text, ok):
    assert (validate_decision_text(text) is None) == ok


def test_validate_email():
    assert validate_email("user@example.com")
    assert not validate_email("not-an-email")
    assert not validate_email(None)


def test_password_hash_roundtrip_and_long_passwords():
    hashed = get_password_hash("hunter22")
    assert verify_password("hunter22", hashed)
    assert not verify_password("hunter23", hashed)

    long_password = "p" * 100
    long_hash = get_password_hash(long_password)
    assert verify_password(long_password, long_hash)
    assert not verify_password("p" * 99, long_hash)


def test_verify_password_with_malformed_hash():
    assert verify_password("anything", "not-a-bcrypt-hash") is False


def test_constant_time_equals():
    assert constant_time_equals("abc", "abc")
    assert not constant_time_equals("abc", "abd")
    assert not constant_time_equals("abc", "abcd")


def test_generate_session_id():
    session_id = generate_session_id()
    assert len(session_id) == 64
    int(session_id, 16)


def test_token_expiry_is_enforced():
    issued = datetime.now(timezone.utc) - timedelta(hours=2)
    expired = create_access_token({"email": "a"}, issued_at=issued, expires_delta=timedelta(hours=1))
    assert verify_token(expired) is None

    live = create_access_token({"email": "a"}, issued_at=datetime.now(timezone.utc), expires_delta=timedelta(hours=1))
    assert verify_token(live)["email"] == "a"


def test_sensitive_field_filter_redacts_mapping_args():
    record = logging.LogRecord(
        "lawlens", logging.INFO, __file__, 1, "login %(email)s", ({"email": "a@b.c", "password": "secret"},), None
    )
    SensitiveFieldFilter().filter(record)
    assert record.args == {"email": "a@b.c", "password": "<redacted>"}


def test_sensitive_field_filter_redacts_nested_tokens():
    record = logging.LogRecord(
        "lawlens", logging.INFO, __file__, 1, {"headers": {"Cookie": "admin_token=x"}, "token": "abc"}, None, None
    )
    SensitiveFieldFilter().filter(record)
    assert record.msg == {"headers": {"Cookie": "<redacted>"}, "token": "<redacted>"}


def test_error_codes_are_all_raised_somewhere():
    codes = [name for name in vars(ErrorCode) if name.isupper()]
    source = "\n".join(
        path.read_text(encoding="utf-8")
        for path in Path(__file__).resolve().parents[3].joinpath("lawlens").rglob("*.py")
        if path.name != "exceptions.py"
    )
    assert [code for code in codes if f"ErrorCode.{code}" not in source] == []


@pytest.mark.parametrize("func,param", [
    ("lawlens.services.bad_decision_service:generate_share_slug", "length"),
    ("lawlens.services.stats_service:StatsService.get_stats", "now"),
    ("lawlens.services.stats_service:StatsService._count_questions", "status"),
])
def test_none_defaults_are_annotated_optional(func, param):
    module_name, qualname = func.split(":")
    target = importlib.import_module(module_name)
    for part in qualname.split("."):
        target = getattr(target, part)
    hint = typing.get_type_hints(target)[param]
    assert type(None) in typing.get_args(hint)


def test_package_metadata_does_not_publish_design_notes():
    pyproject = Path(__file__).resolve().parents[3].joinpath("pyproject.toml").read_text(encoding="utf-8")
    assert "DESIGN.md" not in pyproject
