#!/usr/bin/env python3
"""Power-cycle PoE ports on a Netgear Plus switch.

Usage::

    export NETGEAR_HOST="192.168.0.2"
    export NETGEAR_PASSWORD="your-password"
    python examples/poe_cycle.py 1 3

Prints the PoE status before and after the cycle.  The attached devices
lose power briefly and reboot.
"""

from __future__ import annotations

import json
import os
import sys


def _env(name: str, default: str | None = None) -> str:
    value = os.environ.get(name, default)
    if value is None:
        print(f"ERROR: required environment variable {name!r} is not set.", file=sys.stderr)
        sys.exit(1)
    return value


def main() -> None:
    if len(sys.argv) < 2:
        print(f"usage: {sys.argv[0]} PORT [PORT ...]", file=sys.stderr)
        sys.exit(2)
    try:
        ports = [int(arg) for arg in sys.argv[1:]]
    except ValueError:
        print("ERROR: ports must be integers.", file=sys.stderr)
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
        before = driver.get_poe_status()
        driver.cycle_poe(ports)
        after = driver.get_poe_status()
    except Exception as exc:  # noqa: BLE001
        print(f"ERROR: {exc}", file=sys.stderr)
        sys.exit(1)
    finally:
        driver.close()

    print(json.dumps({"before": before, "after": after}, indent=2))


if __name__ == "__main__":
    main()
