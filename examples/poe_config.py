#!/usr/bin/env python3
"""Change the PoE configuration of one port on a Netgear Plus switch.

Usage::

    export NETGEAR_HOST="192.168.0.2"
    export NETGEAR_PASSWORD="your-password"
    python examples/poe_config.py 3 priority=High power_limit_w=15.4
    python examples/poe_config.py 4 enabled=false

Prints the configured PoE settings after the change.
"""

from __future__ import annotations

import json
import os
import sys
from typing import Any


def _env(name: str, default: str | None = None) -> str:
    value = os.environ.get(name, default)
    if value is None:
        print(f"ERROR: required environment variable {name!r} is not set.", file=sys.stderr)
        sys.exit(1)
    return value


def _parse_field(arg: str) -> tuple[str, Any]:
    key, _, raw = arg.partition("=")
    if key == "enabled":
        return key, raw.lower() in ("1", "true", "on", "yes")
    if key == "power_limit_w":
        return key, float(raw)
    return key, raw


def main() -> None:
    if len(sys.argv) < 3:
        print(f"usage: {sys.argv[0]} PORT FIELD=VALUE [FIELD=VALUE ...]", file=sys.stderr)
        sys.exit(2)
    try:
        port = int(sys.argv[1])
        fields = dict(_parse_field(arg) for arg in sys.argv[2:])
    except ValueError:
        print("ERROR: PORT must be an integer and power_limit_w a number.", file=sys.stderr)
        sys.exit(2)

    host = _env("NETGEAR_HOST")
    password = _env("NETGEAR_PASSWORD", "")

    from napalm_ngplus.driver import NGPlusDriver

    driver = NGPlusDriver(
        hostname=host,
        password=password,
        optional_args={"token_store": "file"},
    )
    try:
        driver.open()
        driver.set_poe_config(port, **fields)
        settings = driver.get_poe_settings()
    except Exception as exc:  # noqa: BLE001
        print(f"ERROR: {exc}", file=sys.stderr)
        sys.exit(1)
    finally:
        driver.close()

    print(json.dumps(settings.get(f"Port {port}", {}), indent=2))


if __name__ == "__main__":
    main()
