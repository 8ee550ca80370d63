"""Seed extraction and password encryption for the Netgear Plus login form.

The login page embeds a one-time numeric seed in ``<input id="rand">``.  The
browser script interleaves the password with that seed character by
character and submits the MD5 hex digest of the result instead of the
password.  The procedure is fixed by the firmware; any deviation produces a
digest the switch rejects without further detail.
"""

from __future__ import annotations

import hashlib
import re

from bs4 import BeautifulSoup

from napalm_ngplus.client.errors import SeedNotFoundError

# Literal markup served by older 30x firmwares, matched when the DOM lookup
# finds nothing (e.g. the input sits inside a script-generated string).
_SEED_RE: re.Pattern[str] = re.compile(
    r"""id=['"]rand['"]\s+value=['"](\d+)['"]"""
)


def extract_seed(html: str) -> str:
    """Return the login seed embedded in the login page *html*.

    Args:
        html: Raw login page markup.

    Returns:
        The seed as a string of decimal digits.

    Raises:
        SeedNotFoundError: If no numeric ``rand`` value is present.
    """
    soup = BeautifulSoup(html, "lxml")
    tag = soup.find(id="rand")
    value = tag.get("value") if tag is not None else None
    if isinstance(value, str) and value.strip().isdigit():
        return value.strip()
    m = _SEED_RE.search(html)
    if m:
        return m.group(1)
    raise SeedNotFoundError(
        "No seed value found in login page; the page layout is not recognised."
    )


def merge(password: str, seed: str) -> str:
    """Interleave *password* and *seed* one character at a time.

    ``merge("admin", "424242") == "a4d2m4i2n42"``.  Once the shorter string
    is exhausted the remainder of the longer one is appended unchanged.
    """
    out: list[str] = []
    for i in range(max(len(password), len(seed))):
        if i < len(password):
            out.append(password[i])
        if i < len(seed):
            out.append(seed[i])
    return "".join(out)


def encrypt_password(password: str, seed: str) -> str:
    """Return the login credential for *password* and *seed*.

    Args:
        password: Plaintext admin password.
        seed: Seed from :func:`extract_seed`.

    Returns:
        32-character lowercase hex MD5 digest of :func:`merge`.
    """
    return hashlib.md5(merge(password, seed).encode("utf-8")).hexdigest()
