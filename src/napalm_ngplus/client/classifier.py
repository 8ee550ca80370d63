"""Response classification: login-required detection and token extraction.

The switches never report session expiry explicitly.  An expired or missing
session is answered with a (tiny) redirect page pointing at the login form,
so expiry is inferred from the body of every authenticated response.
"""

from __future__ import annotations

import logging
import re

import requests
from bs4 import BeautifulSoup

from napalm_ngplus.vendor.netgear.models import HardwareFamily

logger = logging.getLogger(__name__)

# Bodies shorter than this carry no page content.
MIN_CONTENT_LENGTH: int = 10

LOGIN_MARKERS: tuple[str, ...] = (
    "/login.cgi",       # GS30x
    "/wmi/login",       # GS316
    "/redirect.html",   # GS316
)

SESSION_COOKIE_30X: str = "SID"
SESSION_COOKIE_316: str = "gambitCookie"
GAMBIT_PARAM: str = "Gambit"

# Body of a successful write reply on both families.
WRITE_ACK: str = "SUCCESS"

_SID_RE: re.Pattern[str] = re.compile(r"(?:^|[\s,;])SID=([^;,\s]+)")

# Fallbacks for the GS316 token when no hidden input carries it: a link such
# as ``dashboard.html?Gambit=...`` or a script assignment.
_GAMBIT_URL_RE: re.Pattern[str] = re.compile(r"[?&]Gambit=([A-Za-z0-9]+)")
_GAMBIT_JS_RE: re.Pattern[str] = re.compile(
    r"""gambit["']?\s*[:=]\s*["']([A-Za-z0-9]+)["']""", re.IGNORECASE
)


def is_login_required(body: str) -> bool:
    """Return ``True`` if *body* is a login/redirect page rather than data.

    Args:
        body: Response body of an authenticated request.
    """
    if len(body) < MIN_CONTENT_LENGTH:
        return True
    return has_login_marker(body)


def has_login_marker(body: str) -> bool:
    """Return ``True`` if *body* links to a login page.

    Write requests are classified with this check alone: their successful
    reply is a bare ``SUCCESS``, shorter than :data:`MIN_CONTENT_LENGTH`.
    """
    return any(marker in body for marker in LOGIN_MARKERS)


def extract_token(family: HardwareFamily, response: requests.Response) -> str | None:
    """Extract the session token from a switch response.

    GS30x switches hand out the token as the ``SID`` cookie of the login
    response.  GS316 switches embed the Gambit token in the page body.

    Args:
        family: Hardware family that produced *response*.
        response: Response to inspect.

    Returns:
        The token, or ``None`` if the response carries none.
    """
    if family is HardwareFamily.GS30X:
        return extract_sid_cookie(response.headers.get("Set-Cookie", ""))
    return extract_gambit_token(response.text)


def extract_sid_cookie(set_cookie: str) -> str | None:
    """Return the ``SID`` value from a ``Set-Cookie`` header, if any."""
    m = _SID_RE.search(set_cookie)
    return m.group(1) if m else None


def extract_gambit_token(html: str) -> str | None:
    """Return the Gambit token embedded in a GS316 page, if any."""
    soup = BeautifulSoup(html, "lxml")
    tag = soup.find("input", attrs={"name": GAMBIT_PARAM})
    if tag is not None:
        value = tag.get("value")
        if isinstance(value, str) and value.strip():
            return value.strip()
    for pattern in (_GAMBIT_URL_RE, _GAMBIT_JS_RE):
        m = pattern.search(html)
        if m:
            return m.group(1)
    return None


_ERROR_RES: tuple[re.Pattern[str], ...] = (
    re.compile(r"""error["\s]*[:=]["\s]*"([^"]+)\""""),
    re.compile(r"<div[^>]*error[^>]*>([^<]+)</div>"),
    re.compile(r"""alert\s*\(\s*["']([^"']+)["']\s*\)"""),
)


def extract_error_message(body: str) -> str | None:
    """Return the error text a write reply reports, or ``None``.

    Recognises ``error: "..."`` assignments, ``<div class="error">`` blocks
    and ``alert("...")`` calls.
    """
    for pattern in _ERROR_RES:
        m = pattern.search(body)
        if m and m.group(1).strip():
            return m.group(1).strip()
    return None
