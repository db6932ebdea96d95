"""
Tests for admin token extraction and checks.

Path: tests/test_security.py
"""
import pytest
from starlette.requests import Request

from event_site.core.exceptions import AuthError, ConfigError
from event_site.core.security import check_admin, extract_admin_tokens


def make_request(headers=None, query=""):
    scope = {
        "type": "http",
        "method": "GET",
        "path": "/",
        "headers": [(k.lower().encode(), v.encode()) for k, v in (headers or {}).items()],
        "query_string": query.encode(),
    }
    return Request(scope)


def test_extracts_all_sources_in_order():
    request = make_request({"Authorization": "Bearer aaa", "x-admin-token": " bbb "}, "token=ccc")
    assert extract_admin_tokens(request) == ["aaa", "bbb", "ccc"]


def test_blank_sources_ignored():
    request = make_request({"Authorization": "Bearer   "}, "token=")
    assert extract_admin_tokens(request) == []


def test_optional_check_passes_without_secret():
    check_admin(make_request(), None, required=False)


def test_required_check_without_secret():
    with pytest.raises(ConfigError):
        check_admin(make_request({"x-admin-token": "anything"}), None, required=True)


def test_matching_query_token():
    check_admin(make_request(query="token=secret"), "secret")


def test_mismatch():
    with pytest.raises(AuthError):
        check_admin(make_request({"Authorization": "Bearer nope"}), "secret")
