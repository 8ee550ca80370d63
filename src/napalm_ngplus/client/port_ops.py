"""Port configuration writes for Netgear Plus switches.

Only GS316 firmware exposes a port configuration form::

    POST /iss/specific/interface.html
        Gambit=<token>&port=3&name=printer&speed=Auto
            &ingress_limit=No+Limit&egress_limit=No+Limit&flow_control=on

Fields absent from the form are left unchanged.  The reply carries no
``SUCCESS`` marker; a rejected update is reported as an error message in
the page (``error: "..."``, an error ``<div>`` or an ``alert(...)``).
GS30x models reject every call with :exc:`.OperationNotSupportedError`.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from napalm_ngplus.client.classifier import extract_error_message
from napalm_ngplus.client.errors import NGPlusOperationError, NotAuthenticatedError
from napalm_ngplus.client.session import NGPlusClient
from napalm_ngplus.model.port import PortUpdate
from napalm_ngplus.vendor.netgear.endpoints import (
    Operation,
    resolve,
    validate_supported,
)
from napalm_ngplus.vendor.netgear.mappings import (
    GS316_PORTS,
    PORT_NAME_MAX_LEN,
    PORT_SPEED,
    RATE_LIMIT,
    code_for,
    label_for,
)

logger = logging.getLogger(__name__)


def update_ports(client: NGPlusClient, host: str, updates: Iterable[PortUpdate]) -> None:
    """Apply *updates* to the ports of *host*, one request per port.

    Every update is validated before the first request is sent.

    Args:
        client: Client holding a session for *host*.
        host: Switch address or base URL.
        updates: Desired port configurations.

    Raises:
        ValueError: If *updates* is empty, an update changes nothing, or a
            field is invalid (port outside ``1..16``, empty or over-long
            name, name with control characters, unknown speed or rate
            limit label).
        NotAuthenticatedError: If *client* has no session for *host*.
        OperationNotSupportedError: If the host's family has no port
            configuration form.
        NGPlusOperationError: If the switch reports an error for a port.
    """
    pending = list(updates)
    if not pending:
        raise ValueError("No port updates given")
    payloads = [build_port_update_payload(update) for update in pending]

    if not client.is_authenticated(host):
        raise NotAuthenticatedError(f"No session for {host!r}; please login first")
    family = client.family(host)
    validate_supported(family, Operation.PORT_UPDATE)
    path = resolve(family, Operation.PORT_UPDATE).path

    for update, payload in zip(pending, payloads):
        logger.debug("Updating %s port %d: %s", host, update.port_id, payload)
        body = client.do(host, Operation.PORT_UPDATE, payload)
        message = extract_error_message(body)
        if message is not None:
            raise NGPlusOperationError(
                host=host,
                endpoint=path,
                message=f"update failed for port {update.port_id}: {message}",
            )
        logger.info("Port %d on %s updated", update.port_id, host)


def build_port_update_payload(update: PortUpdate) -> dict[str, str]:
    """Validate *update* and return its port configuration form.

    Speed and rate limit labels are matched case-insensitively and sent in
    the spelling the switch UI uses; form codes are accepted as well.

    Raises:
        ValueError: If *update* is empty or a field is invalid.
    """
    if update.is_empty():
        raise ValueError(f"No settings to change on port {update.port_id}")
    if not 1 <= update.port_id <= GS316_PORTS:
        raise ValueError(
            f"given port id {update.port_id}, doesn't fit in range 1..{GS316_PORTS}"
        )

    payload = {"port": str(update.port_id)}
    if update.name is not None:
        _check_name(update.name)
        payload["name"] = update.name
    if update.speed is not None:
        payload["speed"] = label_for(code_for(update.speed, PORT_SPEED), PORT_SPEED)
    if update.ingress_rate_limit is not None:
        payload["ingress_limit"] = label_for(
            code_for(update.ingress_rate_limit, RATE_LIMIT), RATE_LIMIT
        )
    if update.egress_rate_limit is not None:
        payload["egress_limit"] = label_for(
            code_for(update.egress_rate_limit, RATE_LIMIT), RATE_LIMIT
        )
    if update.flow_control is not None:
        payload["flow_control"] = "on" if update.flow_control else "off"
    return payload


def set_port_name(client: NGPlusClient, host: str, port_id: int, name: str) -> None:
    """Set the description of one port."""
    update_ports(client, host, [PortUpdate(port_id=port_id, name=name)])


def set_port_speed(client: NGPlusClient, host: str, port_id: int, speed: str) -> None:
    """Set the speed of one port (e.g. ``"Auto"``, ``"100M full"``)."""
    update_ports(client, host, [PortUpdate(port_id=port_id, speed=speed)])


def set_port_flow_control(
    client: NGPlusClient, host: str, port_id: int, enabled: bool
) -> None:
    """Turn flow control of one port on or off."""
    update_ports(client, host, [PortUpdate(port_id=port_id, flow_control=enabled)])


def set_port_limits(
    client: NGPlusClient, host: str, port_id: int, ingress: str, egress: str
) -> None:
    """Set the ingress and egress rate limits of one port."""
    update_ports(
        client,
        host,
        [PortUpdate(port_id=port_id, ingress_rate_limit=ingress, egress_rate_limit=egress)],
    )


def disable_port(client: NGPlusClient, host: str, port_id: int) -> None:
    """Administratively disable one port (speed ``Disable``)."""
    set_port_speed(client, host, port_id, "Disable")


def enable_port(client: NGPlusClient, host: str, port_id: int) -> None:
    """Enable one port with automatic speed negotiation."""
    set_port_speed(client, host, port_id, "Auto")


def _check_name(name: str) -> None:
    if not name.strip():
        raise ValueError("port name must not be empty")
    if len(name) > PORT_NAME_MAX_LEN:
        raise ValueError(
            f"port name {name[:20]!r}... is longer than {PORT_NAME_MAX_LEN} characters"
        )
    if any(ord(ch) < 0x20 or ord(ch) == 0x7F for ch in name):
        raise ValueError(f"port name {name!r} contains control characters")
