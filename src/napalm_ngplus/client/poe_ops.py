"""PoE write operations for Netgear Plus switches.

Power cycling cuts PoE power on the selected ports and restores it
immediately; the attached devices reboot.  Configuration changes the admin
state, power mode, priority, power limit and detection type of one port.
Each family has its own forms:

    GS30x: POST /PoEPortConfig.cgi
        hash=<anti-forgery hash>&ACTION=Reset&port0=checked&port2=checked
        hash=<anti-forgery hash>&ACTION=Apply&portID=0&ADMIN_MODE=1
            &PORT_PRIO=0&POW_MOD=3&POW_LIMT_TYP=2&POW_LIMT=30.0
            &DETEC_TYP=2&DISCONNECT_TYP=2
        -> SUCCESS

    GS316: POST /iss/specific/poePortConf.html
        Gambit=<token>&TYPE=resetPoe&PoePort=101000000000000
        Gambit=<token>&TYPE=submitPoe&PORT_NO=1&ADMIN_STATE=1
            &PRIORITY=NOTSET&POWER_MODE=NOTSET&POWER_LIMIT_TYPE=NOTSET
            &POWER_LIMIT_VALUE=300&DETECTION=NOTSET&DISCONNECT_TYPE=NOTSET
        -> SUCCESS

Port numbers are 1-based in this API; the GS30x form fields are 0-based and
the GS316 ``PoePort`` mask has one character per PoE port.  The GS30x apply
form must carry every field, so unchanged values are taken from the current
configuration page; GS316 accepts ``NOTSET`` for fields to keep.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from napalm_ngplus.client.classifier import WRITE_ACK
from napalm_ngplus.client.errors import (
    NGPlusOperationError,
    NGPlusParseError,
    NotAuthenticatedError,
)
from napalm_ngplus.client.session import NGPlusClient
from napalm_ngplus.model.poe import PoEPortSetting, PoEPortUpdate
from napalm_ngplus.parser.poe import (
    parse_poe_hash,
    parse_poe_port_ids,
    parse_poe_settings,
    parse_poe_status,
)
from napalm_ngplus.vendor.netgear.endpoints import Operation, resolve
from napalm_ngplus.vendor.netgear.mappings import (
    GS316_POE_PORTS,
    GS316_POWER_LIMIT_SCALE,
    POE_DETECTION,
    POE_LIMIT_TYPE,
    POE_MAX_POWER_LIMIT_W,
    POE_POWER_MODE,
    POE_PRIORITY,
    code_for,
)
from napalm_ngplus.vendor.netgear.models import HardwareFamily

logger = logging.getLogger(__name__)

# Largest PoE port count of any GS30x model (GS308EP/EPP).
GS30X_MAX_POE_PORTS: int = 8

# GS30x apply-form values used when the config page does not render a field.
_GS30X_DEFAULTS: dict[str, str] = {
    "PORT_PRIO": "0",
    "POW_MOD": "3",
    "POW_LIMT_TYP": "2",
    "POW_LIMT": "30.0",
    "DETEC_TYP": "2",
    "DISCONNECT_TYP": "2",
}

_NOTSET: str = "NOTSET"


def cycle_poe_ports(client: NGPlusClient, host: str, ports: Iterable[int]) -> None:
    """Power-cycle the PoE output of *ports* on *host*.

    Args:
        client: Client holding a session for *host*.
        host: Switch address or base URL.
        ports: 1-based PoE port numbers.

    Raises:
        ValueError: If *ports* is empty or a port is outside the family's
            PoE port range.  Raised before the cycle request is sent.
        NotAuthenticatedError: If *client* has no session for *host*.
        NGPlusOperationError: If the switch does not answer ``SUCCESS``.
    """
    wanted = sorted(set(ports))
    if not wanted:
        raise ValueError("No PoE ports given")
    _require_session(client, host)
    family = client.family(host)
    if family is HardwareFamily.GS316:
        _check_range(wanted, GS316_POE_PORTS)
        payload = build_gs316_cycle_payload(wanted)
    else:
        _check_range(wanted, GS30X_MAX_POE_PORTS)
        page = client.do(host, Operation.POE_SETTINGS)
        _check_range(wanted, _gs30x_poe_port_count(client, host, page))
        payload = build_gs30x_cycle_payload(parse_poe_hash(page), wanted)

    logger.debug("Cycling PoE on %s ports %s", host, wanted)
    _submit(client, host, family, payload)
    logger.info("PoE power cycled on %s ports %s", host, wanted)


def set_poe_port_config(client: NGPlusClient, host: str, update: PoEPortUpdate) -> None:
    """Apply the non-``None`` fields of *update* to one PoE port of *host*.

    Labels are those of :mod:`napalm_ngplus.vendor.netgear.mappings`
    (e.g. ``priority="High"``, ``mode="802.3at"``); form codes are accepted
    as well.

    Raises:
        ValueError: If *update* changes nothing, names an unknown label, has
            a power limit outside ``(0, 30]`` W or a port outside the PoE
            port range.  Raised before the apply request is sent.
        NotAuthenticatedError: If *client* has no session for *host*.
        NGPlusOperationError: If the switch does not answer ``SUCCESS``.
    """
    _validate_poe_update(update)
    _require_session(client, host)
    family = client.family(host)
    if family is HardwareFamily.GS316:
        _check_range([update.port_id], GS316_POE_PORTS)
        payload = build_gs316_config_payload(update)
    else:
        _check_range([update.port_id], GS30X_MAX_POE_PORTS)
        page = client.do(host, Operation.POE_SETTINGS)
        _check_range([update.port_id], _gs30x_poe_port_count(client, host, page))
        current = next(
            (
                s
                for s in parse_poe_settings(HardwareFamily.GS30X, page)
                if s.port_id == update.port_id
            ),
            None,
        )
        payload = build_gs30x_config_payload(parse_poe_hash(page), update, current)

    logger.debug("Setting PoE config on %s port %d: %s", host, update.port_id, payload)
    _submit(client, host, family, payload)
    logger.info("PoE configuration applied on %s port %d", host, update.port_id)


# ---------------------------------------------------------------------------
# Payload builders
# ---------------------------------------------------------------------------


def build_gs30x_cycle_payload(security_hash: str, ports: Iterable[int]) -> dict[str, str]:
    """Return the GS30x ``PoEPortConfig.cgi`` reset form for 1-based *ports*."""
    payload = {"hash": security_hash, "ACTION": "Reset"}
    for port in sorted(set(ports)):
        payload[f"port{port - 1}"] = "checked"
    return payload


def build_gs316_cycle_payload(ports: Iterable[int]) -> dict[str, str]:
    """Return the GS316 ``poePortConf.html`` reset form for 1-based *ports*."""
    selected = set(ports)
    mask = "".join(
        "1" if port in selected else "0" for port in range(1, GS316_POE_PORTS + 1)
    )
    return {"TYPE": "resetPoe", "PoePort": mask}


def build_gs30x_config_payload(
    security_hash: str,
    update: PoEPortUpdate,
    current: PoEPortSetting | None = None,
) -> dict[str, str]:
    """Return the GS30x ``PoEPortConfig.cgi`` apply form for one port.

    Fields ``None`` in *update* keep the value shown in *current*; fields
    neither given nor rendered fall back to the switch defaults.
    """
    enabled = update.enabled
    if enabled is None:
        enabled = current.enabled if current is not None else True

    def pick(desired: str | None, shown: str, table: dict[str, str], field: str) -> str:
        if desired is not None:
            return code_for(desired, table)
        if shown:
            return code_for(shown, table)
        return _GS30X_DEFAULTS[field]

    limit = update.power_limit_w
    if limit is None and current is not None:
        limit = current.power_limit_w

    return {
        "hash": security_hash,
        "ACTION": "Apply",
        "portID": str(update.port_id - 1),
        "ADMIN_MODE": "1" if enabled else "0",
        "PORT_PRIO": pick(
            update.priority, current.priority if current else "", POE_PRIORITY, "PORT_PRIO"
        ),
        "POW_MOD": pick(update.mode, current.mode if current else "", POE_POWER_MODE, "POW_MOD"),
        "POW_LIMT_TYP": pick(
            update.power_limit_type,
            current.power_limit_type if current else "",
            POE_LIMIT_TYPE,
            "POW_LIMT_TYP",
        ),
        "POW_LIMT": f"{limit:.1f}" if limit is not None else _GS30X_DEFAULTS["POW_LIMT"],
        "DETEC_TYP": pick(
            update.detection_type,
            current.detection_type if current else "",
            POE_DETECTION,
            "DETEC_TYP",
        ),
        "DISCONNECT_TYP": _GS30X_DEFAULTS["DISCONNECT_TYP"],
    }


def build_gs316_config_payload(update: PoEPortUpdate) -> dict[str, str]:
    """Return the GS316 ``poePortConf.html`` submit form for one port."""

    def code(value: str | None, table: dict[str, str]) -> str:
        return code_for(value, table) if value is not None else _NOTSET

    limit = update.power_limit_w if update.power_limit_w is not None else POE_MAX_POWER_LIMIT_W
    return {
        "TYPE": "submitPoe",
        "PORT_NO": str(update.port_id),
        "ADMIN_STATE": _NOTSET if update.enabled is None else ("1" if update.enabled else "0"),
        "PRIORITY": code(update.priority, POE_PRIORITY),
        "POWER_MODE": code(update.mode, POE_POWER_MODE),
        "POWER_LIMIT_TYPE": code(update.power_limit_type, POE_LIMIT_TYPE),
        "POWER_LIMIT_VALUE": str(round(limit * GS316_POWER_LIMIT_SCALE)),
        "DETECTION": code(update.detection_type, POE_DETECTION),
        "DISCONNECT_TYPE": _NOTSET,
    }


# ---------------------------------------------------------------------------
# Internals
# ---------------------------------------------------------------------------


def _require_session(client: NGPlusClient, host: str) -> None:
    if not client.is_authenticated(host):
        raise NotAuthenticatedError(f"No session for {host!r}; please login first")


def _submit(
    client: NGPlusClient, host: str, family: HardwareFamily, payload: dict[str, str]
) -> None:
    """POST *payload* to the PoE form and require the ``SUCCESS`` reply."""
    result = client.do(host, Operation.POE_UPDATE, payload).strip()
    if result != WRITE_ACK:
        raise NGPlusOperationError(
            host=host,
            endpoint=resolve(family, Operation.POE_UPDATE).path,
            message=result,
        )


def _validate_poe_update(update: PoEPortUpdate) -> None:
    values = (
        update.enabled,
        update.mode,
        update.priority,
        update.power_limit_type,
        update.power_limit_w,
        update.detection_type,
    )
    if all(v is None for v in values):
        raise ValueError(f"No PoE settings to change on port {update.port_id}")
    for value, table in (
        (update.mode, POE_POWER_MODE),
        (update.priority, POE_PRIORITY),
        (update.power_limit_type, POE_LIMIT_TYPE),
        (update.detection_type, POE_DETECTION),
    ):
        if value is not None:
            code_for(value, table)
    limit = update.power_limit_w
    if limit is not None and not 0 < limit <= POE_MAX_POWER_LIMIT_W:
        raise ValueError(
            f"power limit {limit} W doesn't fit in range 0..{POE_MAX_POWER_LIMIT_W} W"
        )


def _check_range(ports: list[int], count: int) -> None:
    for port in ports:
        if port < 1 or port > count:
            raise ValueError(
                f"given port id {port}, doesn't fit in range 1..{count}"
            )


def _gs30x_poe_port_count(client: NGPlusClient, host: str, config_page: str) -> int:
    """Return the number of PoE ports of a GS30x switch.

    Read from the port circles of the configuration page; the status page is
    consulted only when the configuration page draws none.
    """
    ids = parse_poe_port_ids(config_page)
    if ids:
        return len(ids)
    statuses = parse_poe_status(
        HardwareFamily.GS30X, client.do(host, Operation.POE_STATUS)
    )
    if not statuses:
        raise NGPlusParseError(f"Cannot determine the PoE ports of {host!r}")
    return len(statuses)
