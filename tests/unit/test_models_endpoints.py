"""Unit tests for napalm_ngplus.vendor.netgear.models and .endpoints."""

from __future__ import annotations

import pathlib

import pytest

from napalm_ngplus.client.errors import ModelNotDetectedError, OperationNotSupportedError
from napalm_ngplus.vendor.netgear.endpoints import (
    Operation,
    resolve,
    supported_operations,
    validate_supported,
)
from napalm_ngplus.vendor.netgear.models import (
    HardwareFamily,
    SwitchModel,
    detect_family,
    detect_model,
    parse_family,
)

FIXTURES = pathlib.Path(__file__).parent.parent / "fixtures"


# ---------------------------------------------------------------------------
# Model detection
# ---------------------------------------------------------------------------

@pytest.mark.parametrize(
    ("html", "expected"),
    [
        ("<title>GS316EPP</title>", SwitchModel.GS316EPP),
        ("<title>GS316EP</title>", SwitchModel.GS316EP),
        ("<title>GS308EPP</title>", SwitchModel.GS308EPP),
        ("<title>GS308EP</title>", SwitchModel.GS308EP),
        ("<title>GS305EPP</title>", SwitchModel.GS305EPP),
        ("<title>GS305EP</title>", SwitchModel.GS305EP),
    ],
)
def test_detect_model_markers(html: str, expected: SwitchModel) -> None:
    assert detect_model(html) is expected


def test_detect_model_prefers_most_specific() -> None:
    # "GS316EP" is a substring of "GS316EPP"
    assert detect_model("Netgear GS316EPP switch") is SwitchModel.GS316EPP


def test_detect_model_redirect_page_is_gs30x() -> None:
    html = (FIXTURES / "gs30x_root.html").read_text()
    assert detect_model(html) is SwitchModel.GS30xEPx
    assert detect_family(html) is HardwareFamily.GS30X


def test_detect_model_redirect_marker_case_insensitive() -> None:
    assert detect_model("<p>REDIRECT TO LOGIN</p>") is SwitchModel.GS30xEPx


def test_detect_family_gs316_root() -> None:
    html = (FIXTURES / "gs316_root.html").read_text()
    assert detect_family(html) is HardwareFamily.GS316


def test_detect_model_is_repeatable() -> None:
    html = (FIXTURES / "gs30x_root.html").read_text()
    first = detect_model(html)
    assert detect_model(html) is first
    assert detect_model("<title>GS316EPP</title>") is detect_model("<title>GS316EPP</title>")


def test_detect_model_unknown_raises() -> None:
    with pytest.raises(ModelNotDetectedError):
        detect_model("<html><title>Some other device</title></html>")


@pytest.mark.parametrize(
    ("model", "family"),
    [
        (SwitchModel.GS305EP, HardwareFamily.GS30X),
        (SwitchModel.GS308EPP, HardwareFamily.GS30X),
        (SwitchModel.GS30xEPx, HardwareFamily.GS30X),
        (SwitchModel.GS316EP, HardwareFamily.GS316),
        (SwitchModel.GS316EPP, HardwareFamily.GS316),
    ],
)
def test_model_family(model: SwitchModel, family: HardwareFamily) -> None:
    assert model.family is family


@pytest.mark.parametrize(
    ("value", "family"),
    [
        ("GS30xEPx", HardwareFamily.GS30X),
        ("gs316epx", HardwareFamily.GS316),
        ("GS308EPP", HardwareFamily.GS30X),
        (" GS316EP ", HardwareFamily.GS316),
    ],
)
def test_parse_family(value: str, family: HardwareFamily) -> None:
    assert parse_family(value) is family


def test_parse_family_unknown_raises() -> None:
    with pytest.raises(ValueError, match="unknown"):
        parse_family("GS108Ev3")


# ---------------------------------------------------------------------------
# Endpoint registry
# ---------------------------------------------------------------------------

def test_every_pair_resolves() -> None:
    for family in HardwareFamily:
        for op in Operation:
            desc = resolve(family, op)
            if desc.supported:
                assert desc.path.startswith("/")
                assert desc.method in ("GET", "POST")


@pytest.mark.parametrize(
    ("family", "op", "path", "method"),
    [
        (HardwareFamily.GS30X, Operation.LOGIN_PAGE, "/login.cgi", "GET"),
        (HardwareFamily.GS30X, Operation.LOGIN, "/login.cgi", "POST"),
        (HardwareFamily.GS30X, Operation.DASHBOARD, "/dashboard.cgi", "GET"),
        (HardwareFamily.GS30X, Operation.POE_STATUS, "/getPoePortStatus.cgi", "GET"),
        (HardwareFamily.GS30X, Operation.POE_UPDATE, "/PoEPortConfig.cgi", "POST"),
        (HardwareFamily.GS316, Operation.LOGIN_PAGE, "/wmi/login", "GET"),
        (HardwareFamily.GS316, Operation.LOGIN, "/redirect.html", "POST"),
        (HardwareFamily.GS316, Operation.LOGOUT, "/iss/specific/logout.html", "GET"),
        (HardwareFamily.GS316, Operation.DASHBOARD, "/iss/specific/dashboard.html", "GET"),
        (HardwareFamily.GS316, Operation.POE_UPDATE, "/iss/specific/poePortConf.html", "POST"),
    ],
)
def test_resolve_paths(
    family: HardwareFamily, op: Operation, path: str, method: str
) -> None:
    desc = resolve(family, op)
    assert desc.supported
    assert desc.path == path
    assert desc.method == method


def test_gs316_poe_status_requires_getdata() -> None:
    desc = resolve(HardwareFamily.GS316, Operation.POE_STATUS)
    assert dict(desc.params) == {"GetData": "TRUE"}


@pytest.mark.parametrize(
    "op", [Operation.LOGOUT, Operation.PORT_STATUS, Operation.PORT_UPDATE]
)
def test_gs30x_unsupported_operations(op: Operation) -> None:
    assert not resolve(HardwareFamily.GS30X, op).supported
    with pytest.raises(OperationNotSupportedError) as exc_info:
        validate_supported(HardwareFamily.GS30X, op)
    assert exc_info.value.family == "GS30xEPx"
    assert exc_info.value.operation == op.value


def test_operation_not_supported_message() -> None:
    err = OperationNotSupportedError(family="GS30xEPx", operation="logout")
    assert str(err) == "logout operation not supported on GS30xEPx models"


def test_gs316_supports_everything() -> None:
    assert supported_operations(HardwareFamily.GS316) == list(Operation)


def test_validate_supported_passes_for_supported_pair() -> None:
    validate_supported(HardwareFamily.GS30X, Operation.DASHBOARD)
