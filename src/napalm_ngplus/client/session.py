"""Client façade over the authenticator, gateway and token store."""

from __future__ import annotations

import logging
import time
from collections.abc import Mapping

from napalm_ngplus.client.auth import Authenticator
from napalm_ngplus.client.credentials import EnvPasswordResolver, PasswordResolver
from napalm_ngplus.client.errors import NGPlusRequestError
from napalm_ngplus.client.gateway import RequestGateway
from napalm_ngplus.client.http import TransportPool
from napalm_ngplus.client.token_store import MemoryTokenStore, TokenRecord, TokenStore
from napalm_ngplus.vendor.netgear.endpoints import Operation
from napalm_ngplus.vendor.netgear.models import HardwareFamily

logger = logging.getLogger(__name__)


class NGPlusClient:
    """Authenticated access to any number of Netgear Plus switches.

    Wraps an :class:`.Authenticator` and a :class:`.RequestGateway` sharing
    one :class:`.TokenStore` and one :class:`.TransportPool`, and adds:

    - Bounded login retries with linear backoff on transport errors.
    - Token cache administration.

    Args:
        token_store: Token persistence (default: in-memory).
        password_resolver: Password source for :meth:`login_auto`
            (default: :class:`.EnvPasswordResolver`).
        timeout_s: Default request timeout in seconds.
        verify_tls: Whether to verify TLS certificates.
    """

    def __init__(
        self,
        token_store: TokenStore | None = None,
        password_resolver: PasswordResolver | None = None,
        timeout_s: float = 15.0,
        verify_tls: bool = True,
    ) -> None:
        self.token_store: TokenStore = (
            token_store if token_store is not None else MemoryTokenStore()
        )
        self._transports = TransportPool(timeout_s=timeout_s, verify_tls=verify_tls)
        self.auth = Authenticator(
            self._transports,
            self.token_store,
            password_resolver if password_resolver is not None else EnvPasswordResolver(),
        )
        self.gateway = RequestGateway(self._transports, self.token_store)

    # ------------------------------------------------------------------
    # Authentication
    # ------------------------------------------------------------------

    def login(
        self,
        host: str,
        password: str,
        *,
        family: HardwareFamily | None = None,
        timeout_s: float | None = None,
    ) -> TokenRecord:
        """Log in once; see :meth:`.Authenticator.login`."""
        return self.auth.login(host, password, family=family, timeout_s=timeout_s)

    def login_auto(
        self,
        host: str,
        *,
        family: HardwareFamily | None = None,
        timeout_s: float | None = None,
    ) -> TokenRecord:
        """Log in with a resolved password; see :meth:`.Authenticator.login_auto`."""
        return self.auth.login_auto(host, family=family, timeout_s=timeout_s)

    def login_with_retry(
        self,
        host: str,
        password: str | None = None,
        *,
        family: HardwareFamily | None = None,
        attempts: int = 3,
        backoff_s: float = 1.0,
        timeout_s: float | None = None,
    ) -> TokenRecord:
        """Log in, retrying transport failures with linear backoff.

        Only :exc:`.NGPlusRequestError` (timeouts, refused connections) is
        retried; attempt *n* is followed by a ``backoff_s * n`` second pause.
        Structural and credential errors propagate immediately.

        Args:
            host: Switch address or base URL.
            password: Plaintext password; resolved via :meth:`login_auto`
                when ``None``.
            family: Hardware family, if already known.
            attempts: Maximum number of login attempts (at least 1).
            backoff_s: Base pause between attempts in seconds.
            timeout_s: Per-request timeout in seconds.

        Raises:
            NGPlusRequestError: If every attempt failed on transport.
        """
        attempts = max(1, attempts)
        for attempt in range(1, attempts):
            try:
                return self._login_once(host, password, family, timeout_s)
            except NGPlusRequestError as exc:
                delay = backoff_s * attempt
                logger.warning(
                    "Login to %s failed (attempt %d/%d): %s; retrying in %.1fs",
                    host,
                    attempt,
                    attempts,
                    exc.cause,
                    delay,
                )
                time.sleep(delay)
        return self._login_once(host, password, family, timeout_s)

    def _login_once(
        self,
        host: str,
        password: str | None,
        family: HardwareFamily | None,
        timeout_s: float | None,
    ) -> TokenRecord:
        if password is None:
            return self.login_auto(host, family=family, timeout_s=timeout_s)
        return self.login(host, password, family=family, timeout_s=timeout_s)

    def logout(self, host: str, *, timeout_s: float | None = None) -> None:
        """Forget the session for *host*; see :meth:`.Authenticator.logout`."""
        self.auth.logout(host, timeout_s=timeout_s)

    def is_authenticated(self, host: str) -> bool:
        """Return ``True`` if a session token is stored for *host*."""
        return self.auth.is_authenticated(host)

    # ------------------------------------------------------------------
    # Requests
    # ------------------------------------------------------------------

    def do(
        self,
        host: str,
        operation: Operation,
        params: Mapping[str, str] | None = None,
        *,
        timeout_s: float | None = None,
    ) -> str:
        """Perform an authenticated operation; see :meth:`.RequestGateway.do`."""
        return self.gateway.do(host, operation, params, timeout_s=timeout_s)

    def family(self, host: str) -> HardwareFamily:
        """Return the hardware family of *host*.

        Uses the stored token record when present, otherwise the
        authenticator's detection cache or a ``GET /`` request.
        """
        record = self.token_store.get(host)
        if record is not None:
            return record.family
        return self.auth.detect_family(host)

    # ------------------------------------------------------------------
    # Token cache administration
    # ------------------------------------------------------------------

    def cached_hosts(self) -> list[str]:
        """Return the keys of all cached token records."""
        return self.token_store.hosts()

    def clear_token(self, host: str) -> None:
        """Drop the cached token for *host* without contacting the switch."""
        self.token_store.clear(host)

    def clear_all_tokens(self) -> None:
        """Drop every cached token."""
        self.token_store.clear_all()

    def close(self) -> None:
        """Close all HTTP transports; cached tokens are kept."""
        self._transports.close()

    def __enter__(self) -> NGPlusClient:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()
