#!/usr/bin/env python3
"""Smoke-test script: connect to a Netgear Plus switch and print get_interfaces().

Environment variables
---------------------
NETGEAR_HOST        Switch base URL or IP (e.g. http://192.168.0.2)
NETGEAR_PASSWORD    Admin password; may also be NETGEAR_PASSWORD_<HOST>
NETGEAR_FAMILY      Optional family or model name (e.g. GS316EPP)
NETGEAR_VERIFY_TLS  Set to "true" to verify TLS (default: false)
"""

from __future__ import annotations

import json
import os
import sys

from napalm_ngplus.driver import NGPlusDriver


def main() -> None:
    host = os.environ.get("NETGEAR_HOST", "")
    if not host:
        print("ERROR: NETGEAR_HOST is not set.", file=sys.stderr)
        sys.exit(1)

    optional_args: dict[str, object] = {
        "verify_tls": os.environ.get("NETGEAR_VERIFY_TLS", "false").lower() == "true",
    }
    family = os.environ.get("NETGEAR_FAMILY")
    if family:
        optional_args["family"] = family

    # An empty password makes the driver read NETGEAR_PASSWORD[_<HOST>].
    driver = NGPlusDriver(hostname=host, optional_args=optional_args)
    try:
        driver.open()
        interfaces = driver.get_interfaces()
    except Exception as exc:  # noqa: BLE001
        print(f"ERROR: {exc}", file=sys.stderr)
        sys.exit(1)
    finally:
        driver.close()

    print(json.dumps(interfaces, indent=2))


if __name__ == "__main__":
    main()
