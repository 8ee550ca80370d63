"""Netgear Plus NAPALM driver: top-level NetworkDriver implementation."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from typing import Any, TypeVar

from napalm.base.base import NetworkDriver

from napalm_ngplus.client.errors import (
    ModelNotDetectedError,
    NGPlusError,
    SessionExpiredError,
)
from napalm_ngplus.client.poe_ops import cycle_poe_ports, set_poe_port_config
from napalm_ngplus.client.port_ops import update_ports
from napalm_ngplus.client.session import NGPlusClient
from napalm_ngplus.client.token_store import FileTokenStore, MemoryTokenStore, TokenStore
from napalm_ngplus.model.poe import PoEPortUpdate
from napalm_ngplus.model.port import PortSetting, PortUpdate
from napalm_ngplus.parser.poe import parse_poe_settings, parse_poe_status
from napalm_ngplus.parser.port import parse_port_settings
from napalm_ngplus.vendor.netgear.endpoints import Operation
from napalm_ngplus.vendor.netgear.models import HardwareFamily, detect_model, parse_family

logger = logging.getLogger(__name__)

_VENDOR: str = "Netgear"

_T = TypeVar("_T")


class NGPlusDriver(NetworkDriver):  # type: ignore[misc]
    """NAPALM driver for Netgear Plus PoE switches (GS305EP(P), GS308EP(P), GS316EP(P)).

    Communicates with the switch via its web UI.  HTML responses are parsed
    with BeautifulSoup to extract structured data.  The switches have no
    user names; *username* is accepted for NAPALM compatibility and ignored.

    Args:
        hostname: IP address or hostname of the switch, optionally including
            the URL scheme and port (e.g. ``http://192.168.0.2:8080``).
        username: Ignored.
        password: Admin password.  When empty, the password is read from
            ``NETGEAR_PASSWORD_<HOST>`` or ``NETGEAR_PASSWORD``.
        timeout: Default request timeout in seconds.
        optional_args: Optional driver configuration overrides.
            Supported keys:

            - ``verify_tls`` (bool): Verify TLS certificates (default ``False``).
            - ``token_store`` (str): ``"memory"`` (default) or ``"file"``.
            - ``token_cache_dir`` (str): Directory for ``"file"`` tokens.
            - ``login_attempts`` (int): Login attempts on transport errors
              (default 3).
            - ``login_backoff_s`` (float): Base backoff between login
              attempts (default 1.0).
            - ``family`` (str): Skip model detection, e.g. ``"GS316EPx"``
              or ``"GS308EPP"``.
            - ``logout_on_close`` (bool): Log out in :meth:`close`.  Defaults
              to ``True`` for the ``"memory"`` store and ``False`` for the
              ``"file"`` store, so a cached token survives the process.
    """

    def __init__(
        self,
        hostname: str,
        username: str = "",
        password: str = "",
        timeout: int = 60,
        optional_args: dict[str, Any] | None = None,
    ) -> None:
        self.hostname = hostname
        self.username = username
        self.password = password
        self.timeout = timeout
        self.optional_args: dict[str, Any] = optional_args or {}

        self._verify_tls: bool = bool(self.optional_args.get("verify_tls", False))
        self._login_attempts: int = int(self.optional_args.get("login_attempts", 3))
        self._login_backoff_s: float = float(
            self.optional_args.get("login_backoff_s", 1.0)
        )
        family = self.optional_args.get("family")
        self._family: HardwareFamily | None = (
            parse_family(str(family)) if family else None
        )
        self._token_store_kind: str = str(
            self.optional_args.get("token_store", "memory")
        ).lower()
        self._logout_on_close: bool = bool(
            self.optional_args.get("logout_on_close", self._token_store_kind != "file")
        )
        self._client: NGPlusClient | None = None

        logger.debug(
            "NGPlusDriver initialised: host=%s family=%s",
            self.hostname,
            self._family.value if self._family else "auto",
        )

    # ------------------------------------------------------------------
    # Connection lifecycle
    # ------------------------------------------------------------------

    def open(self) -> None:
        """Authenticate with the switch, reusing a cached token if present.

        Raises:
            InvalidCredentialsError: If login is rejected by the switch.
            PasswordNotFoundError: If no password is given or configured.
            NGPlusRequestError: If the switch is unreachable after all
                login attempts.
        """
        logger.info("Opening connection to %s", self.hostname)
        self._client = NGPlusClient(
            token_store=self._build_token_store(),
            timeout_s=float(self.timeout),
            verify_tls=self._verify_tls,
        )
        if self._client.is_authenticated(self.hostname):
            logger.info("Reusing cached session for %s", self.hostname)
            return
        self._login(self._client)

    def close(self) -> None:
        """Close the HTTP transports, logging out first if configured.

        Logging out drops the session token from the store; with
        ``logout_on_close`` disabled the token is kept for the next
        :meth:`open`.  Never raises.
        """
        if self._client is not None:
            logger.info("Closing connection to %s", self.hostname)
            try:
                if self._logout_on_close:
                    self._client.logout(self.hostname)
            except Exception:  # noqa: BLE001
                logger.debug("Logout failed (ignored)", exc_info=True)
            finally:
                self._client.close()
                self._client = None

    # ------------------------------------------------------------------
    # NAPALM getters
    # ------------------------------------------------------------------

    def get_facts(self) -> dict[str, Any]:
        """Return general device facts conforming to the NAPALM schema.

        The web UI exposes no serial number, firmware version or uptime on
        the pages used here; those keys are empty (uptime ``-1.0``).

        Returns:
            A dict with keys: ``hostname``, ``fqdn``, ``vendor``, ``model``,
            ``serial_number``, ``os_version``, ``uptime``, ``interface_list``.
        """
        client = self._require_client()
        family = client.family(self.hostname)
        html = self._do(Operation.DASHBOARD)
        try:
            model = detect_model(html).value
        except ModelNotDetectedError:
            model = family.value
        ports = parse_port_settings(family, html)

        return {
            "hostname": self.hostname,
            "fqdn": self.hostname,
            "vendor": _VENDOR,
            "model": model,
            "serial_number": "",
            "os_version": "",
            "uptime": -1.0,
            "interface_list": [_interface_name(p) for p in ports],
        }

    def get_interfaces(self) -> dict[str, Any]:
        """Return interface information conforming to the NAPALM schema.

        Returns:
            Dict keyed by interface name (``"Port 1"``, ...), each value
            holding ``is_up``, ``is_enabled``, ``description``,
            ``last_flapped``, ``speed``, ``mtu`` and ``mac_address``.
        """
        client = self._require_client()
        family = client.family(self.hostname)
        ports = parse_port_settings(family, self._do(Operation.PORT_SETTINGS))

        result: dict[str, Any] = {}
        for port in ports:
            result[_interface_name(port)] = {
                "is_up": port.link_up,
                "is_enabled": port.admin_up,
                "description": port.name,
                "last_flapped": -1.0,
                "speed": float(port.link_speed_mbps),
                "mtu": 0,
                "mac_address": "",
            }
        return result

    def get_poe_status(self) -> dict[str, Any]:
        """Return per-port PoE state.

        Returns:
            Dict keyed by interface name, each value holding ``status``,
            ``power_class``, ``voltage_v``, ``current_ma`` and ``power_w``.
            Readings the switch does not report are ``None``.
        """
        client = self._require_client()
        family = client.family(self.hostname)
        statuses = parse_poe_status(family, self._do(Operation.POE_STATUS))
        return {
            f"Port {s.port_id}": {
                "status": s.status,
                "power_class": s.power_class,
                "voltage_v": s.voltage_v,
                "current_ma": s.current_ma,
                "power_w": s.power_w,
            }
            for s in statuses
        }

    def get_poe_settings(self) -> dict[str, Any]:
        """Return the configured PoE settings of every PoE port.

        Returns:
            Dict keyed by interface name, each value holding ``enabled``,
            ``mode``, ``priority``, ``power_limit_type``, ``power_limit_w``
            and ``detection_type``.
        """
        client = self._require_client()
        family = client.family(self.hostname)
        settings = parse_poe_settings(family, self._do(Operation.POE_SETTINGS))
        return {
            f"Port {s.port_id}": {
                "enabled": s.enabled,
                "mode": s.mode,
                "priority": s.priority,
                "power_limit_type": s.power_limit_type,
                "power_limit_w": s.power_limit_w,
                "detection_type": s.detection_type,
            }
            for s in settings
        }

    def cycle_poe(self, ports: Iterable[int]) -> None:
        """Power-cycle the PoE output of the given 1-based *ports*.

        Raises:
            ValueError: If a port is outside the switch's PoE port range.
            NGPlusOperationError: If the switch rejects the request.
        """
        wanted = list(ports)
        self._write(lambda c: cycle_poe_ports(c, self.hostname, wanted))

    def set_poe_config(self, port_id: int, **fields: Any) -> None:
        """Change the PoE configuration of one port.

        Keyword arguments are the fields of :class:`.PoEPortUpdate`:
        ``enabled``, ``mode``, ``priority``, ``power_limit_type``,
        ``power_limit_w`` and ``detection_type``.

        Raises:
            TypeError: On an unknown keyword argument.
            ValueError: If a value is invalid.
            NGPlusOperationError: If the switch rejects the request.
        """
        update = PoEPortUpdate(port_id=port_id, **fields)
        self._write(lambda c: set_poe_port_config(c, self.hostname, update))

    def update_interface(
        self,
        port_id: int,
        *,
        description: str | None = None,
        speed: str | None = None,
        ingress_rate_limit: str | None = None,
        egress_rate_limit: str | None = None,
        flow_control: bool | None = None,
    ) -> None:
        """Change the configuration of one port (GS316 only).

        Raises:
            ValueError: If a value is invalid.
            OperationNotSupportedError: On GS30x models.
            NGPlusOperationError: If the switch reports an error.
        """
        update = PortUpdate(
            port_id=port_id,
            name=description,
            speed=speed,
            ingress_rate_limit=ingress_rate_limit,
            egress_rate_limit=egress_rate_limit,
            flow_control=flow_control,
        )
        self._write(lambda c: update_ports(c, self.hostname, [update]))

    def set_interface_enabled(self, port_id: int, enabled: bool) -> None:
        """Enable (speed ``Auto``) or disable (speed ``Disable``) one port."""
        self.update_interface(port_id, speed="Auto" if enabled else "Disable")

    def is_alive(self) -> dict[str, bool]:
        """Return whether a session token is held for the switch."""
        return {
            "is_alive": self._client is not None
            and self._client.is_authenticated(self.hostname)
        }

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _do(self, operation: Operation) -> str:
        """Issue *operation*, logging in again once if the session expired."""
        client = self._require_client()
        try:
            return client.do(self.hostname, operation)
        except SessionExpiredError:
            self._relogin(client)
            return client.do(self.hostname, operation)

    def _write(self, action: Callable[[NGPlusClient], _T]) -> _T:
        """Run a write *action*, logging in again once if the session expired."""
        client = self._require_client()
        try:
            return action(client)
        except SessionExpiredError:
            self._relogin(client)
            return action(client)

    def _relogin(self, client: NGPlusClient) -> None:
        logger.info("Session for %s expired; logging in again", self.hostname)
        client.clear_token(self.hostname)
        self._login(client)

    def _login(self, client: NGPlusClient) -> None:
        client.login_with_retry(
            self.hostname,
            self.password or None,
            family=self._family,
            attempts=self._login_attempts,
            backoff_s=self._login_backoff_s,
        )

    def _build_token_store(self) -> TokenStore:
        kind = self._token_store_kind
        if kind == "file":
            return FileTokenStore(self.optional_args.get("token_cache_dir"))
        if kind == "memory":
            return MemoryTokenStore()
        raise ValueError(f"Unknown token_store {kind!r}; expected 'memory' or 'file'")

    def _require_client(self) -> NGPlusClient:
        """Return the active client or raise :exc:`.NGPlusError`."""
        if self._client is None:
            raise NGPlusError("Session not open; call open() first.")
        return self._client


def _interface_name(port: PortSetting) -> str:
    return f"Port {port.port_id}"
