"""Typed models for port/interface data."""

from __future__ import annotations

from dataclasses import dataclass

from napalm_ngplus.vendor.netgear.mappings import speed_to_mbps


@dataclass
class PortSetting:
    """Settings and live state of a single switch port, as shown on the dashboard.

    Values are display labels.  GS30x firmware reports speed, rate limits
    and flow control as numeric codes; the parser maps those to labels.

    Attributes:
        port_id: 1-based port number as reported by the switch.
        name: User-assigned port description (may be empty).
        speed: Configured speed label (e.g. ``"Auto"``, ``"Disable"``).
        ingress_rate_limit: Ingress rate limit label (e.g. ``"No Limit"``).
        egress_rate_limit: Egress rate limit label.
        flow_control: Flow control label (``"On"`` / ``"Off"``).
        port_status: Link state text (e.g. ``"AVAILABLE"``, ``"CONNECTED"``).
        link_speed: Negotiated link speed text (e.g. ``"1000M"``), or empty.
    """

    port_id: int
    name: str = ""
    speed: str = ""
    ingress_rate_limit: str = ""
    egress_rate_limit: str = ""
    flow_control: str = ""
    port_status: str = ""
    link_speed: str = ""

    @property
    def admin_up(self) -> bool:
        """``False`` only when the port's speed is set to ``Disable``."""
        return self.speed.strip().lower() != "disable"

    @property
    def link_speed_mbps(self) -> int:
        """Negotiated link speed in Mbps, 0 if down or unknown."""
        return speed_to_mbps(self.link_speed)

    @property
    def link_up(self) -> bool:
        """``True`` if the port reports an established link."""
        if self.port_status.strip().lower() in ("connected", "up", "link up"):
            return True
        return self.link_speed_mbps > 0


@dataclass
class PortUpdate:
    """Desired configuration of one port; ``None`` fields are left unchanged.

    Attributes:
        port_id: 1-based port number.
        name: New port description.
        speed: Speed label (e.g. ``"Auto"``, ``"Disable"``, ``"100M full"``).
        ingress_rate_limit: Ingress rate limit label (e.g. ``"No Limit"``).
        egress_rate_limit: Egress rate limit label.
        flow_control: ``True`` for On, ``False`` for Off.
    """

    port_id: int
    name: str | None = None
    speed: str | None = None
    ingress_rate_limit: str | None = None
    egress_rate_limit: str | None = None
    flow_control: bool | None = None

    def is_empty(self) -> bool:
        """Return ``True`` if no field would change."""
        return all(
            value is None
            for value in (
                self.name,
                self.speed,
                self.ingress_rate_limit,
                self.egress_rate_limit,
                self.flow_control,
            )
        )
