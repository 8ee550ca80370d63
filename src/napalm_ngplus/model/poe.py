"""Typed models for PoE data."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class PoEPortStatus:
    """Power-over-Ethernet state of a single port.

    Attributes:
        port_id: 1-based port number.
        port_name: Port label as rendered by the switch.
        status: Power delivery state (e.g. ``"Delivering Power"``,
            ``"Searching"``, ``"Disabled"``).
        power_class: Detected PD class text (e.g. ``"Class 4"``).
        voltage_v: Output voltage in volts, ``None`` if not reported.
        current_ma: Output current in milliamperes, ``None`` if not reported.
        power_w: Output power in watts, ``None`` if not reported.
    """

    port_id: int
    port_name: str = ""
    status: str = ""
    power_class: str = ""
    voltage_v: float | None = None
    current_ma: float | None = None
    power_w: float | None = None


@dataclass
class PoEPortSetting:
    """Configured PoE settings of a single port, as shown on the PoE config page.

    Labels follow the switch UI (see :mod:`napalm_ngplus.vendor.netgear.mappings`).
    Empty strings and ``None`` mean the page did not render the value.

    Attributes:
        port_id: 1-based port number.
        port_name: Port label.
        enabled: ``True`` if PoE output is administratively enabled.
        mode: Power mode (e.g. ``"802.3at"``, ``"Legacy"``).
        priority: ``"Low"``, ``"High"`` or ``"Critical"``.
        power_limit_type: ``"None"``, ``"Class"`` or ``"User"``.
        power_limit_w: User power limit in watts.
        detection_type: Detection type (e.g. ``"IEEE 802"``).
    """

    port_id: int
    port_name: str = ""
    enabled: bool = True
    mode: str = ""
    priority: str = ""
    power_limit_type: str = ""
    power_limit_w: float | None = None
    detection_type: str = ""


@dataclass
class PoEPortUpdate:
    """Desired PoE configuration of one port.

    ``None`` fields are left unchanged.
    """

    port_id: int
    enabled: bool | None = None
    mode: str | None = None
    priority: str | None = None
    power_limit_type: str | None = None
    power_limit_w: float | None = None
    detection_type: str | None = None
