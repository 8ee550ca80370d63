"""Parsers for the Netgear Plus PoE status and PoE configuration pages."""

from __future__ import annotations

import logging

from bs4 import BeautifulSoup, Tag

from napalm_ngplus.client.errors import NGPlusParseError
from napalm_ngplus.model.poe import PoEPortSetting, PoEPortStatus
from napalm_ngplus.parser.html import (
    normalize_text,
    parse_html,
    parse_number,
    select_text,
    select_value,
)
from napalm_ngplus.vendor.netgear.mappings import (
    GS316_POWER_LIMIT_SCALE,
    POE_DETECTION,
    POE_FORM_FIELDS,
    POE_LIMIT_TYPE,
    POE_POWER_MODE,
    POE_PRIORITY,
    label_for,
)
from napalm_ngplus.vendor.netgear.models import HardwareFamily

logger = logging.getLogger(__name__)

_GS30X_ITEM_SELECTOR: str = "li.poePortStatusListItem, li.poe_port_list_item"

# Column order of the generic status table fallback.
_TABLE_COLUMNS: tuple[str, ...] = (
    "port_id",
    "port_name",
    "status",
    "power_class",
    "voltage_v",
    "current_ma",
    "power_w",
)


def parse_poe_status(family: HardwareFamily, html: str) -> list[PoEPortStatus]:
    """Parse a PoE status page into one :class:`.PoEPortStatus` per port.

    GS30x list items (``li.poePortStatusListItem``) are tried first; when
    none are present, every ``<table>`` row after the header is read as
    ``port, name, status, class, voltage, current, power``.

    Args:
        family: Hardware family that served *html*.
        html: Raw HTML from the ``POE_STATUS`` page.

    Returns:
        PoE port statuses sorted by port number.  Empty if the page lists
        no ports.
    """
    soup = parse_html(html)
    ports = [p for p in map(_parse_list_item, soup.select(_GS30X_ITEM_SELECTOR)) if p]
    if not ports:
        ports = _parse_tables(soup)
    ports.sort(key=lambda p: p.port_id)
    logger.debug("Parsed %d PoE ports from %s status page", len(ports), family.value)
    return ports


def parse_poe_settings(family: HardwareFamily, html: str) -> list[PoEPortSetting]:
    """Parse a PoE configuration page into one :class:`.PoEPortSetting` per port.

    Each port is rendered as an element carrying a ``data-port`` attribute
    whose hidden inputs use the names of the configuration form fields
    (``ADMIN_MODE``, ``PORT_PRIO``, ... on GS30x; ``ADMIN_STATE``,
    ``PRIORITY``, ... on GS316).  GS30x ports drawn only as port circles
    are reported with PoE enabled and no other settings.

    Args:
        family: Hardware family that served *html*.
        html: Raw HTML from the ``POE_SETTINGS`` page.

    Returns:
        PoE port settings sorted by port number.  Empty if the page lists
        no ports.
    """
    soup = parse_html(html)
    fields = POE_FORM_FIELDS[family]
    settings: dict[int, PoEPortSetting] = {}
    for block in soup.select("[data-port]"):
        raw_id = str(block.get("data-port") or "").strip()
        if raw_id.isdigit():
            settings[int(raw_id)] = _parse_setting_block(family, fields, int(raw_id), block)
    if not settings and family is HardwareFamily.GS30X:
        for port_id in parse_poe_port_ids(html):
            settings[port_id] = PoEPortSetting(port_id=port_id, port_name=f"Port {port_id}")
    logger.debug("Parsed %d PoE port settings from %s config page", len(settings), family.value)
    return [settings[k] for k in sorted(settings)]


def parse_poe_hash(html: str) -> str:
    """Return the anti-forgery ``hash`` value from a GS30x configuration page.

    Raises:
        NGPlusParseError: If the page has no non-empty ``hash`` input.
    """
    soup = parse_html(html)
    for node in soup.select("input[name=hash], input#hash"):
        value = str(node.get("value") or "").strip()
        if value:
            return value
    raise NGPlusParseError("No 'hash' input found on PoE configuration page")


def parse_poe_port_ids(html: str) -> list[int]:
    """Return the PoE port numbers shown on a GS30x configuration page.

    The page draws one ``li.port_circle`` per PoE-capable port.
    """
    soup = parse_html(html)
    ids: list[int] = []
    for node in soup.select("li.port_circle span.port_circle_num"):
        text = normalize_text(node.get_text())
        if text.isdigit():
            ids.append(int(text))
    return sorted(set(ids))


# ---------------------------------------------------------------------------
# Internals
# ---------------------------------------------------------------------------


def _parse_list_item(item: Tag) -> PoEPortStatus | None:
    raw_id = select_value(item, "input[type=hidden].port")
    if not raw_id.isdigit():
        return None
    status = PoEPortStatus(
        port_id=int(raw_id),
        port_name=select_text(item, "span.poe-port-index span"),
        status=select_text(item, "span.poe-power-mode span"),
        power_class=select_text(item, "span.poe-portPwr-width span"),
    )
    for span in item.select("div.poe_port_status div div span"):
        _apply_measurement(status, normalize_text(span.get_text()))
    return status


def _apply_measurement(status: PoEPortStatus, text: str) -> None:
    """Assign a ``"53.2 V"`` / ``"120 mA"`` / ``"6.4 W"`` reading by its unit."""
    value = parse_number(text)
    if value is None:
        return
    if "mA" in text:
        status.current_ma = value
    elif "V" in text:
        status.voltage_v = value
    elif "W" in text:
        status.power_w = value


def _parse_tables(soup: BeautifulSoup) -> list[PoEPortStatus]:
    ports: list[PoEPortStatus] = []
    for table in soup.find_all("table"):
        for row in table.find_all("tr")[1:]:
            cells = [normalize_text(td.get_text()) for td in row.find_all("td")]
            if not cells or not cells[0].isdigit():
                continue
            fields = dict(zip(_TABLE_COLUMNS, cells))
            ports.append(
                PoEPortStatus(
                    port_id=int(fields["port_id"]),
                    port_name=fields.get("port_name", ""),
                    status=fields.get("status", ""),
                    power_class=fields.get("power_class", ""),
                    voltage_v=parse_number(fields.get("voltage_v", "")),
                    current_ma=parse_number(fields.get("current_ma", "")),
                    power_w=parse_number(fields.get("power_w", "")),
                )
            )
    return ports


def _parse_setting_block(
    family: HardwareFamily, fields: dict[str, str], port_id: int, block: Tag
) -> PoEPortSetting:
    def value(attr: str) -> str:
        return select_value(block, f"input[name={fields[attr]}]")

    limit = parse_number(value("power_limit_w"))
    if limit is not None and family is HardwareFamily.GS316:
        limit /= GS316_POWER_LIMIT_SCALE
    return PoEPortSetting(
        port_id=port_id,
        port_name=select_text(block, ".port-name") or f"Port {port_id}",
        enabled=value("enabled") != "0",
        mode=label_for(value("mode"), POE_POWER_MODE),
        priority=label_for(value("priority"), POE_PRIORITY),
        power_limit_type=label_for(value("power_limit_type"), POE_LIMIT_TYPE),
        power_limit_w=limit,
        detection_type=label_for(value("detection_type"), POE_DETECTION),
    )
