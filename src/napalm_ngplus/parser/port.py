"""Parser for the Netgear Plus dashboard port list.

GS30x firmware renders one ``li.list_item`` per port with the settings in
hidden inputs; GS316 firmware renders a ``div.dashboard-port-status`` block
whose columns are parallel lists of ``span``/``p`` elements.
"""

from __future__ import annotations

import logging

from bs4 import Tag

from napalm_ngplus.client.errors import NGPlusParseError
from napalm_ngplus.model.port import PortSetting
from napalm_ngplus.parser.html import normalize_text, parse_html, select_text, select_value
from napalm_ngplus.vendor.netgear.mappings import (
    FLOW_CONTROL,
    PORT_SPEED,
    RATE_LIMIT,
    label_for,
)
from napalm_ngplus.vendor.netgear.models import HardwareFamily

logger = logging.getLogger(__name__)

# GS316 column selectors, in PortSetting field order.
_GS316_COLUMNS: tuple[tuple[str, str], ...] = (
    ("name", "span.port-name span.name"),
    ("speed", "p.speed-text"),
    ("ingress_rate_limit", "p.ingress-text"),
    ("egress_rate_limit", "p.egress-text"),
    ("flow_control", "p.flow-text"),
    ("port_status", "span.status-on-port"),
    ("link_speed", "p.link-speed-text"),
)


def parse_port_settings(family: HardwareFamily, html: str) -> list[PortSetting]:
    """Parse the dashboard page into one :class:`.PortSetting` per port.

    Args:
        family: Hardware family that served *html*.
        html: Raw HTML from the ``PORT_SETTINGS`` page.

    Returns:
        Port settings sorted by port number.

    Raises:
        NGPlusParseError: If no port can be extracted.
    """
    if family is HardwareFamily.GS316:
        ports = _parse_gs316(html)
    else:
        ports = _parse_gs30x(html)
    if not ports:
        raise NGPlusParseError(
            f"Zero ports parsed from {family.value} dashboard; "
            "HTML structure may have changed."
        )
    ports.sort(key=lambda p: p.port_id)
    logger.debug("Parsed %d ports from %s dashboard", len(ports), family.value)
    return ports


def _parse_gs30x(html: str) -> list[PortSetting]:
    soup = parse_html(html)
    ports: list[PortSetting] = []
    for item in soup.select("li.list_item"):
        raw_id = select_value(item, "input[type=hidden].port")
        if not raw_id.isdigit():
            continue  # decorative list items
        ports.append(
            PortSetting(
                port_id=int(raw_id),
                name=select_value(item, "input[type=hidden].portName"),
                speed=label_for(
                    select_value(item, "input[type=hidden].Speed"), PORT_SPEED
                ),
                ingress_rate_limit=label_for(
                    select_value(item, "input[type=hidden].ingressRate"),
                    RATE_LIMIT,
                ),
                egress_rate_limit=label_for(
                    select_value(item, "input[type=hidden].egressRate"),
                    RATE_LIMIT,
                ),
                flow_control=label_for(
                    select_value(item, "input[type=hidden].flowCtr"),
                    FLOW_CONTROL,
                ),
                port_status=select_text(item, "span.pull-right"),
                link_speed=select_value(item, "input[type=hidden].LinkedSpeed"),
            )
        )
    return ports


def _parse_gs316(html: str) -> list[PortSetting]:
    soup = parse_html(html)
    ports: list[PortSetting] = []
    for block in soup.select("div.dashboard-port-status"):
        ports.extend(_parse_gs316_block(block))
    return ports


def _parse_gs316_block(block: Tag) -> list[PortSetting]:
    """Zip the parallel column lists of one status block into port rows."""
    numbers = [normalize_text(n.get_text()) for n in block.select("span.port-number")]
    ports: list[PortSetting] = []
    for num in numbers:
        if not num.isdigit():
            raise NGPlusParseError(f"Unexpected GS316 port number {num!r}")
        ports.append(PortSetting(port_id=int(num)))
    for attr, selector in _GS316_COLUMNS:
        # Columns shorter than the port list leave the remaining ports blank.
        for port, node in zip(ports, block.select(selector)):
            setattr(port, attr, normalize_text(node.get_text()))
    return ports
