"""Low-level HTTP client wrapper for Netgear Plus switch web pages."""

from __future__ import annotations

import importlib.metadata
import logging
import threading
from collections.abc import Mapping

import requests

from napalm_ngplus.client.errors import NGPlusRequestError, NGPlusResponseError

logger = logging.getLogger(__name__)

try:
    _VERSION: str = importlib.metadata.version("napalm-ngplus")
except importlib.metadata.PackageNotFoundError:
    _VERSION = "0.0.0"

_USER_AGENT: str = f"napalm-ngplus/{_VERSION}"


def _normalise_base_url(url: str) -> str:
    """Ensure the URL has a scheme and no trailing slash."""
    url = url.rstrip("/")
    if not url.startswith(("http://", "https://")):
        url = "http://" + url
    return url


class NGPlusHTTP:
    """Low-level HTTP wrapper around :class:`requests.Session` for one switch.

    Handles a default ``User-Agent`` header, timeout, TLS verification, and
    maps transport/HTTP errors to :mod:`.errors` types.

    Session credentials are attached explicitly by the caller on every
    request; cookies set by the switch are never replayed from the
    :class:`requests.Session` jar.

    Args:
        base_url: Switch base URL, e.g. ``http://192.168.0.239``.
        timeout_s: Default request timeout in seconds (default 15).
        verify_tls: Whether to verify TLS certificates (default True).
    """

    def __init__(
        self,
        base_url: str,
        timeout_s: float = 15.0,
        verify_tls: bool = True,
    ) -> None:
        self.base_url: str = _normalise_base_url(base_url)
        self.timeout_s: float = timeout_s
        self.verify_tls: bool = verify_tls
        self._session: requests.Session = requests.Session()
        self._session.headers.update({"User-Agent": _USER_AGENT})

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def request(
        self,
        method: str,
        path: str,
        params: Mapping[str, str] | None = None,
        data: Mapping[str, str] | list[tuple[str, str]] | None = None,
        headers: Mapping[str, str] | None = None,
        timeout_s: float | None = None,
        check_status: bool = True,
    ) -> requests.Response:
        """Send an HTTP request to *path* and return the response.

        Args:
            method: HTTP verb (``"GET"`` or ``"POST"``).
            path: URL path relative to :attr:`base_url`.
            params: Optional query-string parameters.
            data: Optional form fields (POST only).
            headers: Extra request headers, e.g. ``Cookie``.
            timeout_s: Per-call timeout overriding :attr:`timeout_s`.
            check_status: Raise :exc:`.NGPlusResponseError` on non-2xx.

        Returns:
            The :class:`requests.Response`.

        Raises:
            NGPlusRequestError: On any transport-level failure.
            NGPlusResponseError: On a non-2xx HTTP status code.
        """
        url = self.base_url + path
        logger.debug("send HTTP %s request to %s", method, url)
        try:
            resp = self._session.request(
                method,
                url,
                params=params,
                data=data,
                headers=dict(headers) if headers else None,
                timeout=timeout_s if timeout_s is not None else self.timeout_s,
                verify=self.verify_tls,
            )
        except requests.exceptions.RequestException as exc:
            raise NGPlusRequestError(url, exc) from exc
        finally:
            self._session.cookies.clear()
        logger.debug("HTTP %d from %s", resp.status_code, url)
        if check_status:
            self._raise_for_status(resp)
        return resp

    def get(
        self,
        path: str,
        params: Mapping[str, str] | None = None,
        timeout_s: float | None = None,
        check_status: bool = True,
    ) -> requests.Response:
        """Send an HTTP GET to *path*; see :meth:`request`."""
        return self.request(
            "GET", path, params=params, timeout_s=timeout_s, check_status=check_status
        )

    def post_form(
        self,
        path: str,
        data: Mapping[str, str] | list[tuple[str, str]] | None = None,
        timeout_s: float | None = None,
    ) -> requests.Response:
        """Send an HTTP POST with form-encoded *data* to *path*; see :meth:`request`."""
        return self.request("POST", path, data=data, timeout_s=timeout_s)

    def close(self) -> None:
        """Close the underlying :class:`requests.Session`."""
        self._session.close()

    def __enter__(self) -> NGPlusHTTP:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    @staticmethod
    def _raise_for_status(resp: requests.Response) -> None:
        if not resp.ok:
            raise NGPlusResponseError(resp.status_code, resp.url)


class TransportPool:
    """Lazily created :class:`NGPlusHTTP` instances, one per switch host.

    Args:
        timeout_s: Default request timeout for new transports.
        verify_tls: TLS verification flag for new transports.
    """

    def __init__(self, timeout_s: float = 15.0, verify_tls: bool = True) -> None:
        self.timeout_s = timeout_s
        self.verify_tls = verify_tls
        self._transports: dict[str, NGPlusHTTP] = {}
        self._lock = threading.Lock()

    def get(self, host: str) -> NGPlusHTTP:
        """Return the transport for *host*, creating it on first use."""
        with self._lock:
            http = self._transports.get(host)
            if http is None:
                http = NGPlusHTTP(
                    base_url=host,
                    timeout_s=self.timeout_s,
                    verify_tls=self.verify_tls,
                )
                self._transports[host] = http
            return http

    def close(self) -> None:
        """Close every transport created so far."""
        with self._lock:
            for http in self._transports.values():
                http.close()
            self._transports.clear()
