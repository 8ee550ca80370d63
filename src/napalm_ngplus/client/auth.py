"""Challenge-response login for Netgear Plus switches.

One login is a single round trip through these stages::

    UNAUTHENTICATED -> SEED_FETCHED -> CREDENTIAL_COMPUTED
                    -> LOGIN_SUBMITTED -> AUTHENTICATED | REJECTED

A token record is written only after the login response has been fully
classified; every failure path leaves the token store untouched.  The
authenticator never retries: bounded retries belong to the caller
(see :meth:`~napalm_ngplus.client.session.NGPlusClient.login_with_retry`).
"""

from __future__ import annotations

import enum
import logging
import threading

from napalm_ngplus.client.classifier import extract_token
from napalm_ngplus.client.codec import encrypt_password, extract_seed
from napalm_ngplus.client.credentials import PasswordResolver
from napalm_ngplus.client.errors import (
    InvalidCredentialsError,
    NGPlusError,
    PasswordNotFoundError,
    TokenCorruptError,
)
from napalm_ngplus.client.gateway import credential_headers, credential_params
from napalm_ngplus.client.http import TransportPool
from napalm_ngplus.client.token_store import TokenRecord, TokenStore
from napalm_ngplus.vendor.netgear.endpoints import Operation, resolve
from napalm_ngplus.vendor.netgear.models import HardwareFamily, detect_model

logger = logging.getLogger(__name__)

# Form field carrying the encrypted password, per family.
_PASSWORD_FIELD: dict[HardwareFamily, str] = {
    HardwareFamily.GS30X: "password",
    HardwareFamily.GS316: "LoginPassword",
}


class LoginStage(str, enum.Enum):
    """Progress of a single login attempt."""

    UNAUTHENTICATED = "unauthenticated"
    SEED_FETCHED = "seed_fetched"
    CREDENTIAL_COMPUTED = "credential_computed"
    LOGIN_SUBMITTED = "login_submitted"
    AUTHENTICATED = "authenticated"
    REJECTED = "rejected"


class Authenticator:
    """Runs the login protocol and owns token creation.

    Args:
        transports: Per-host HTTP transports.
        token_store: Where successful logins are recorded.
        password_resolver: Source of passwords for :meth:`login_auto`.
    """

    def __init__(
        self,
        transports: TransportPool,
        token_store: TokenStore,
        password_resolver: PasswordResolver | None = None,
    ) -> None:
        self._transports = transports
        self._store = token_store
        self._resolve_password = password_resolver
        self._families: dict[str, HardwareFamily] = {}
        self._families_lock = threading.Lock()

    # ------------------------------------------------------------------
    # Model detection
    # ------------------------------------------------------------------

    def detect_family(self, host: str, timeout_s: float | None = None) -> HardwareFamily:
        """Return the hardware family of *host*, probing ``GET /`` once.

        Raises:
            ModelNotDetectedError: If the root page matches no known model.
        """
        with self._families_lock:
            cached = self._families.get(host)
        if cached is not None:
            return cached
        resp = self._transports.get(host).get(
            "/", timeout_s=timeout_s, check_status=False
        )
        if not resp.ok:
            logger.warning(
                "Root page of %s returned HTTP %d; attempting detection anyway",
                host,
                resp.status_code,
            )
        model = detect_model(resp.text)
        logger.info("Detected model %s (%s) at %s", model.value, model.family.value, host)
        self.remember_family(host, model.family)
        return model.family

    def remember_family(self, host: str, family: HardwareFamily) -> None:
        """Record *family* for *host* so no detection round trip is needed."""
        with self._families_lock:
            self._families[host] = family

    def known_family(self, host: str) -> HardwareFamily | None:
        """Return the cached family for *host* without any I/O."""
        with self._families_lock:
            return self._families.get(host)

    # ------------------------------------------------------------------
    # Login / logout
    # ------------------------------------------------------------------

    def login(
        self,
        host: str,
        password: str,
        *,
        family: HardwareFamily | None = None,
        timeout_s: float | None = None,
    ) -> TokenRecord:
        """Authenticate to *host* and store the resulting token record.

        Args:
            host: Switch address or base URL.
            password: Plaintext admin password.
            family: Hardware family, if already known.
            timeout_s: Per-request timeout for every round trip.

        Returns:
            The stored :class:`TokenRecord`.

        Raises:
            ModelNotDetectedError: If *family* is unknown and detection fails.
            SeedNotFoundError: If the login page carries no seed.
            InvalidCredentialsError: If the switch returns no session token.
            NGPlusRequestError: On transport failure.
        """
        if family is None:
            family = self._stored_family(host) or self.detect_family(
                host, timeout_s=timeout_s
            )
        self.remember_family(host, family)
        http = self._transports.get(host)
        stage = LoginStage.UNAUTHENTICATED

        page = resolve(family, Operation.LOGIN_PAGE)
        resp = http.get(page.path, params=page.params or None, timeout_s=timeout_s)
        seed = extract_seed(resp.text)
        stage = _advance(host, stage, LoginStage.SEED_FETCHED)

        credential = encrypt_password(password, seed)
        stage = _advance(host, stage, LoginStage.CREDENTIAL_COMPUTED)

        endpoint = resolve(family, Operation.LOGIN)
        resp = http.post_form(
            endpoint.path,
            data={_PASSWORD_FIELD[family]: credential},
            timeout_s=timeout_s,
        )
        stage = _advance(host, stage, LoginStage.LOGIN_SUBMITTED)

        token = extract_token(family, resp)
        if not token:
            _advance(host, stage, LoginStage.REJECTED)
            raise InvalidCredentialsError(
                f"Login to {host!r} rejected: no session token in response "
                "(wrong password?)"
            )

        record = TokenRecord(family=family, token=token)
        self._store.store(host, record)
        _advance(host, stage, LoginStage.AUTHENTICATED)
        logger.info("Logged in to %s (%s)", host, family.value)
        return record

    def login_auto(
        self,
        host: str,
        *,
        family: HardwareFamily | None = None,
        timeout_s: float | None = None,
    ) -> TokenRecord:
        """Like :meth:`login`, with the password taken from the resolver.

        Raises:
            PasswordNotFoundError: If no resolver is configured or it has no
                password for *host*.
        """
        password = self._resolve_password(host) if self._resolve_password else None
        if not password:
            raise PasswordNotFoundError(f"No password configured for {host!r}")
        return self.login(host, password, family=family, timeout_s=timeout_s)

    def logout(self, host: str, *, timeout_s: float | None = None) -> None:
        """Forget the session for *host*; idempotent.

        Families with a logout page are sent a best-effort logout request
        first; its outcome never prevents the record from being deleted.
        """
        try:
            record = self._store.get(host)
        except TokenCorruptError:
            record = None
        if record is not None:
            self._remote_logout(host, record, timeout_s)
        self._store.delete(host)
        logger.debug("Logged out from %s", host)

    def is_authenticated(self, host: str) -> bool:
        """Return ``True`` if a readable token record exists for *host*."""
        try:
            return self._store.get(host) is not None
        except TokenCorruptError:
            return False

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _stored_family(self, host: str) -> HardwareFamily | None:
        """Return the family of an existing token record, if readable."""
        try:
            record = self._store.get(host)
        except TokenCorruptError:
            return None
        return record.family if record is not None else None

    def _remote_logout(
        self, host: str, record: TokenRecord, timeout_s: float | None
    ) -> None:
        endpoint = resolve(record.family, Operation.LOGOUT)
        if not endpoint.supported:
            return
        try:
            self._transports.get(host).request(
                endpoint.method,
                endpoint.path,
                params=credential_params(record),
                headers=credential_headers(record),
                timeout_s=timeout_s,
                check_status=False,
            )
        except NGPlusError:
            logger.debug("Logout request to %s failed (ignored)", host, exc_info=True)


def _advance(host: str, current: LoginStage, new: LoginStage) -> LoginStage:
    logger.debug("login %s: %s -> %s", host, current.value, new.value)
    return new
