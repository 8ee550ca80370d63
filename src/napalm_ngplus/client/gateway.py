"""Authenticated request dispatch.

Every request after login goes through :class:`RequestGateway`, which
resolves the family-specific endpoint, attaches the session token the way
that family expects it, and classifies the response.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

from napalm_ngplus.client.classifier import (
    GAMBIT_PARAM,
    SESSION_COOKIE_30X,
    SESSION_COOKIE_316,
    extract_gambit_token,
    has_login_marker,
    is_login_required,
)
from napalm_ngplus.client.errors import NotAuthenticatedError, SessionExpiredError
from napalm_ngplus.client.http import TransportPool
from napalm_ngplus.client.token_store import TokenRecord, TokenStore
from napalm_ngplus.vendor.netgear.endpoints import (
    Operation,
    resolve,
    validate_supported,
)
from napalm_ngplus.vendor.netgear.models import HardwareFamily

logger = logging.getLogger(__name__)


def credential_headers(record: TokenRecord) -> dict[str, str]:
    """Return the ``Cookie`` header carrying *record*'s token."""
    if record.family is HardwareFamily.GS316:
        return {"Cookie": f"{SESSION_COOKIE_316}={record.token}"}
    return {"Cookie": f"{SESSION_COOKIE_30X}={record.token}"}


def credential_params(record: TokenRecord) -> dict[str, str]:
    """Return the query parameters carrying *record*'s token, if any."""
    if record.family is HardwareFamily.GS316:
        return {GAMBIT_PARAM: record.token}
    return {}


class RequestGateway:
    """Issues authenticated requests for any host with a stored token.

    The gateway never logs in by itself: it holds no passwords.  An expired
    session surfaces as :exc:`.SessionExpiredError` and the caller decides
    whether to log in again.

    Args:
        transports: Per-host HTTP transports.
        token_store: Store holding the token records.
    """

    def __init__(self, transports: TransportPool, token_store: TokenStore) -> None:
        self._transports = transports
        self._store = token_store

    def do(
        self,
        host: str,
        operation: Operation,
        params: Mapping[str, str] | None = None,
        *,
        timeout_s: float | None = None,
    ) -> str:
        """Perform *operation* on *host* and return the response body.

        GET operations send *params* as query parameters, POST operations as
        form fields.

        Args:
            host: Switch address or base URL.
            operation: Logical operation to perform.
            params: Operation-specific parameters.
            timeout_s: Per-request timeout in seconds.

        Returns:
            Response body as a string.

        Raises:
            NotAuthenticatedError: If no token is stored for *host*.
            TokenCorruptError: If the stored token cannot be decoded.
            OperationNotSupportedError: If the host's family has no endpoint
                for *operation*; raised before any network I/O.
            SessionExpiredError: If the switch answered with its login page.
            NGPlusRequestError: On transport failure.
            NGPlusResponseError: On a non-2xx HTTP status code.
        """
        record = self._store.get(host)
        if record is None:
            raise NotAuthenticatedError(
                f"No session for {host!r}; please login first"
            )
        validate_supported(record.family, operation)
        endpoint = resolve(record.family, operation)

        # Credentials are applied last so caller params cannot replace them.
        query: dict[str, str] = dict(endpoint.params)
        form: dict[str, str] | None = None
        if endpoint.method == "POST":
            form = dict(params or {})
            form.update(credential_params(record))
        elif params:
            query.update(params)
        query.update(credential_params(record))

        resp = self._transports.get(host).request(
            endpoint.method,
            endpoint.path,
            params=query or None,
            data=form,
            headers=credential_headers(record),
            timeout_s=timeout_s,
        )
        body = resp.text

        expired = (
            has_login_marker(body)
            if endpoint.method == "POST"
            else is_login_required(body)
        )
        if expired:
            logger.info("Session for %s expired (%s)", host, operation.value)
            raise SessionExpiredError(
                f"Session for {host!r} expired; please login again"
            )

        if record.family is HardwareFamily.GS316:
            self._recapture_gambit(host, record, body)
        return body

    def _recapture_gambit(self, host: str, record: TokenRecord, body: str) -> None:
        """Store a rotated Gambit token if *body* carries a new one."""
        fresh = extract_gambit_token(body)
        if fresh and fresh != record.token:
            self._store.store(host, TokenRecord(family=record.family, token=fresh))
            logger.debug("Gambit token for %s rotated", host)
