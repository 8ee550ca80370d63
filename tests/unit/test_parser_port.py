"""Unit tests for napalm_ngplus.parser.port and napalm_ngplus.model.port."""

from __future__ import annotations

import pathlib

import pytest

from napalm_ngplus.client.errors import NGPlusParseError
from napalm_ngplus.model.port import PortSetting
from napalm_ngplus.parser.port import parse_port_settings
from napalm_ngplus.vendor.netgear.mappings import (
    POE_DETECTION,
    POE_POWER_MODE,
    POE_PRIORITY,
    code_for,
    label_for,
    speed_to_mbps,
)
from napalm_ngplus.vendor.netgear.models import HardwareFamily

FIXTURES = pathlib.Path(__file__).parent.parent / "fixtures"


# ---------------------------------------------------------------------------
# GS30x dashboard
# ---------------------------------------------------------------------------

@pytest.fixture
def gs30x_ports() -> list[PortSetting]:
    html = (FIXTURES / "gs30x_dashboard.html").read_text()
    return parse_port_settings(HardwareFamily.GS30X, html)


def test_gs30x_port_count_skips_decorative_items(gs30x_ports: list[PortSetting]) -> None:
    assert [p.port_id for p in gs30x_ports] == [1, 2, 3]


def test_gs30x_codes_are_mapped_to_labels(gs30x_ports: list[PortSetting]) -> None:
    assert gs30x_ports[0] == PortSetting(
        port_id=1,
        name="camera-garage",
        speed="Auto",
        ingress_rate_limit="No Limit",
        egress_rate_limit="No Limit",
        flow_control="Off",
        port_status="CONNECTED",
        link_speed="100M",
    )


def test_gs30x_disabled_port(gs30x_ports: list[PortSetting]) -> None:
    port = gs30x_ports[1]
    assert port.speed == "Disable"
    assert port.ingress_rate_limit == "4 Mbit/s"
    assert port.egress_rate_limit == "512 Mbit/s"
    assert port.flow_control == "On"
    assert port.admin_up is False
    assert port.link_up is False
    assert port.link_speed_mbps == 0


def test_gs30x_link_speed(gs30x_ports: list[PortSetting]) -> None:
    assert gs30x_ports[2].link_speed_mbps == 1000
    assert gs30x_ports[2].link_up is True


def test_gs30x_empty_page_raises() -> None:
    with pytest.raises(NGPlusParseError):
        parse_port_settings(HardwareFamily.GS30X, "<html><body><ul></ul></body></html>")


# ---------------------------------------------------------------------------
# GS316 dashboard
# ---------------------------------------------------------------------------

@pytest.fixture
def gs316_ports() -> list[PortSetting]:
    html = (FIXTURES / "gs316_dashboard.html").read_text()
    return parse_port_settings(HardwareFamily.GS316, html)


def test_gs316_columns_are_zipped(gs316_ports: list[PortSetting]) -> None:
    assert [p.port_id for p in gs316_ports] == [1, 2, 16]
    assert gs316_ports[0] == PortSetting(
        port_id=1,
        name="ap-office",
        speed="Auto",
        ingress_rate_limit="No Limit",
        egress_rate_limit="No Limit",
        flow_control="Off",
        port_status="CONNECTED",
        link_speed="1000M",
    )


def test_gs316_empty_name_keeps_alignment(gs316_ports: list[PortSetting]) -> None:
    assert gs316_ports[1].name == ""
    assert gs316_ports[1].speed == "Disable"
    assert gs316_ports[2].name == "uplink"
    assert gs316_ports[2].flow_control == "On"


def test_gs316_short_column_leaves_blanks() -> None:
    html = """
    <div class="dashboard-port-status">
      <span class="port-number">1</span><span class="port-number">2</span>
      <p class="speed-text">Auto</p>
    </div>"""
    ports = parse_port_settings(HardwareFamily.GS316, html)
    assert ports[0].speed == "Auto"
    assert ports[1].speed == ""


def test_gs316_bad_port_number_raises() -> None:
    html = '<div class="dashboard-port-status"><span class="port-number">X</span></div>'
    with pytest.raises(NGPlusParseError):
        parse_port_settings(HardwareFamily.GS316, html)


def test_gs316_parser_ignores_gs30x_markup() -> None:
    html = (FIXTURES / "gs30x_dashboard.html").read_text()
    with pytest.raises(NGPlusParseError):
        parse_port_settings(HardwareFamily.GS316, html)


# ---------------------------------------------------------------------------
# Mappings
# ---------------------------------------------------------------------------

@pytest.mark.parametrize(
    ("text", "mbps"),
    [
        ("1000M", 1000),
        ("100M", 100),
        ("100 Mbps", 100),
        ("1G", 1000),
        ("2.5G", 2500),
        ("", 0),
        ("Link Down", 0),
    ],
)
def test_speed_to_mbps(text: str, mbps: int) -> None:
    assert speed_to_mbps(text) == mbps


def test_label_for_unknown_code_passes_through() -> None:
    assert label_for("99", {"1": "On"}) == "99"
    assert label_for(" 1 ", {"1": "On"}) == "On"


@pytest.mark.parametrize(
    ("label", "table", "code"),
    [
        ("802.3at", POE_POWER_MODE, "3"),
        ("pre-802.3AT", POE_POWER_MODE, "2"),
        (" Critical ", POE_PRIORITY, "2"),
        ("1", POE_PRIORITY, "1"),
        ("IEEE 802", POE_DETECTION, "1"),
        ("4pt 802.3af + Legacy", POE_DETECTION, "2"),
    ],
)
def test_code_for(label: str, table: dict[str, str], code: str) -> None:
    assert code_for(label, table) == code


def test_code_for_unknown_label_lists_valid_values() -> None:
    with pytest.raises(ValueError, match="802.3bt.*Legacy"):
        code_for("802.3bt", POE_POWER_MODE)
