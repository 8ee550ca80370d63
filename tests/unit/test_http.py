"""Unit tests for napalm_ngplus.client.http and the error types it raises."""

from __future__ import annotations

import pytest
import requests
import responses as rsps_lib

from napalm_ngplus.client.errors import (
    NGPlusError,
    NGPlusOperationError,
    NGPlusRequestError,
    NGPlusResponseError,
)
from napalm_ngplus.client.http import NGPlusHTTP, TransportPool, _normalise_base_url

BASE_URL = "http://192.168.0.2"


# ---------------------------------------------------------------------------
# errors.py: exception types
# ---------------------------------------------------------------------------

def test_request_error_wraps_cause() -> None:
    cause = ConnectionError("refused")
    err = NGPlusRequestError(url="http://host/path", cause=cause)
    assert "http://host/path" in str(err)
    assert err.cause is cause
    assert isinstance(err, NGPlusError)


def test_response_error_stores_status() -> None:
    err = NGPlusResponseError(status_code=403, url="http://host/path")
    assert err.status_code == 403
    assert "403" in str(err)


def test_operation_error_message() -> None:
    err = NGPlusOperationError(
        host="192.168.0.2", endpoint="/PoEPortConfig.cgi", message="FAIL"
    )
    assert "/PoEPortConfig.cgi" in str(err)
    assert "FAIL" in str(err)
    assert isinstance(err, NGPlusError)


# ---------------------------------------------------------------------------
# http.py: URL normalisation
# ---------------------------------------------------------------------------

def test_normalise_base_url_strips_slash() -> None:
    assert _normalise_base_url("http://192.168.0.2/") == "http://192.168.0.2"


def test_normalise_base_url_adds_scheme() -> None:
    assert _normalise_base_url("192.168.0.2") == "http://192.168.0.2"


def test_normalise_base_url_preserves_https_and_port() -> None:
    assert _normalise_base_url("https://switch:8443/") == "https://switch:8443"


# ---------------------------------------------------------------------------
# http.py: NGPlusHTTP
# ---------------------------------------------------------------------------

@rsps_lib.activate
def test_http_get_success() -> None:
    rsps_lib.add(rsps_lib.GET, f"{BASE_URL}/dashboard.cgi", body="<html/>", status=200)
    http = NGPlusHTTP(BASE_URL, verify_tls=False)
    resp = http.get("/dashboard.cgi")
    assert resp.status_code == 200
    assert resp.text == "<html/>"
    http.close()


@rsps_lib.activate
def test_http_get_non2xx_raises_response_error() -> None:
    rsps_lib.add(rsps_lib.GET, f"{BASE_URL}/dashboard.cgi", status=403)
    http = NGPlusHTTP(BASE_URL, verify_tls=False)
    with pytest.raises(NGPlusResponseError) as exc_info:
        http.get("/dashboard.cgi")
    assert exc_info.value.status_code == 403
    http.close()


@rsps_lib.activate
def test_http_get_unchecked_status_returns_response() -> None:
    rsps_lib.add(rsps_lib.GET, f"{BASE_URL}/", body="nope", status=404)
    with NGPlusHTTP(BASE_URL) as http:
        resp = http.get("/", check_status=False)
    assert resp.status_code == 404


@rsps_lib.activate
def test_http_get_connection_error_raises_request_error() -> None:
    rsps_lib.add(
        rsps_lib.GET,
        f"{BASE_URL}/dashboard.cgi",
        body=requests.exceptions.ConnectionError("refused"),
    )
    http = NGPlusHTTP(BASE_URL, verify_tls=False)
    with pytest.raises(NGPlusRequestError) as exc_info:
        http.get("/dashboard.cgi")
    assert exc_info.value.url == f"{BASE_URL}/dashboard.cgi"
    http.close()


@rsps_lib.activate
def test_http_timeout_raises_request_error() -> None:
    rsps_lib.add(
        rsps_lib.GET,
        f"{BASE_URL}/dashboard.cgi",
        body=requests.exceptions.ReadTimeout("slow"),
    )
    http = NGPlusHTTP(BASE_URL)
    with pytest.raises(NGPlusRequestError):
        http.get("/dashboard.cgi", timeout_s=0.5)
    http.close()


@rsps_lib.activate
def test_http_post_form_success() -> None:
    rsps_lib.add(rsps_lib.POST, f"{BASE_URL}/login.cgi", body="<html/>", status=200)
    http = NGPlusHTTP(BASE_URL, verify_tls=False)
    resp = http.post_form("/login.cgi", data={"password": "d41d8cd9"})
    assert resp.status_code == 200
    assert rsps_lib.calls[0].request.body == "password=d41d8cd9"
    http.close()


@rsps_lib.activate
def test_http_user_agent_header_sent() -> None:
    rsps_lib.add(rsps_lib.GET, f"{BASE_URL}/dashboard.cgi", body="ok", status=200)
    http = NGPlusHTTP(BASE_URL, verify_tls=False)
    http.get("/dashboard.cgi")
    assert rsps_lib.calls[0].request.headers["User-Agent"].startswith("napalm-ngplus/")
    http.close()


@rsps_lib.activate
def test_http_does_not_replay_switch_cookies() -> None:
    rsps_lib.add(
        rsps_lib.POST,
        f"{BASE_URL}/login.cgi",
        body="<html/>",
        headers={"Set-Cookie": "SID=abc123; PATH=/"},
    )
    rsps_lib.add(rsps_lib.GET, f"{BASE_URL}/dashboard.cgi", body="<html/>")
    http = NGPlusHTTP(BASE_URL)
    http.post_form("/login.cgi", data={"password": "x"})
    http.get("/dashboard.cgi")
    assert "Cookie" not in rsps_lib.calls[1].request.headers
    http.close()


# ---------------------------------------------------------------------------
# http.py: TransportPool
# ---------------------------------------------------------------------------

def test_transport_pool_reuses_transport_per_host() -> None:
    pool = TransportPool(timeout_s=3.0, verify_tls=False)
    first = pool.get("192.168.0.2")
    assert pool.get("192.168.0.2") is first
    assert pool.get("192.168.0.3") is not first
    assert first.base_url == "http://192.168.0.2"
    assert first.timeout_s == 3.0
    assert first.verify_tls is False
    pool.close()


def test_transport_pool_close_forgets_transports() -> None:
    pool = TransportPool()
    first = pool.get("192.168.0.2")
    pool.close()
    assert pool.get("192.168.0.2") is not first
    pool.close()
