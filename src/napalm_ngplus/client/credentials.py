"""Password resolution for unattended logins."""

from __future__ import annotations

import os
import re
from collections.abc import Callable, Mapping

# A resolver maps a switch host to its admin password, or None if unknown.
PasswordResolver = Callable[[str], "str | None"]

ENV_PREFIX: str = "NETGEAR_PASSWORD"

_HOST_SEP_RE: re.Pattern[str] = re.compile(r"[.:\-]")


def host_env_var(host: str) -> str:
    """Return the per-host environment variable name for *host*.

    ``host_env_var("192.168.0.2") == "NETGEAR_PASSWORD_192_168_0_2"``.
    A URL scheme is ignored.
    """
    bare = host.split("://", 1)[-1].rstrip("/")
    return f"{ENV_PREFIX}_{_HOST_SEP_RE.sub('_', bare).upper()}"


class EnvPasswordResolver:
    """Resolve passwords from ``NETGEAR_PASSWORD_<HOST>`` or ``NETGEAR_PASSWORD``.

    Args:
        environ: Mapping to read from (default :data:`os.environ`).
    """

    def __init__(self, environ: Mapping[str, str] | None = None) -> None:
        self._environ = environ if environ is not None else os.environ

    def __call__(self, host: str) -> str | None:
        return self._environ.get(host_env_var(host)) or self._environ.get(ENV_PREFIX)
