#!/usr/bin/env python3
"""Smoke-test script: retrieve device facts from a Netgear Plus switch.

Usage::

    export NETGEAR_HOST="192.168.0.2"
    export NETGEAR_PASSWORD="your-password"
    export NETGEAR_VERIFY_TLS="false"   # optional, default false
    python examples/get_facts.py

Exit codes:
    0: facts retrieved and printed successfully.
    1: missing environment variable or driver error.
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
    host = _env("NETGEAR_HOST")
    password = _env("NETGEAR_PASSWORD")
    verify_tls_raw = os.environ.get("NETGEAR_VERIFY_TLS", "false").lower()
    verify_tls = verify_tls_raw not in {"0", "false", "no", "off"}

    # Import here so import errors surface after env var check.
    from napalm_ngplus.driver import NGPlusDriver

    driver = NGPlusDriver(
        hostname=host,
        password=password,
        optional_args={"verify_tls": verify_tls},
    )

    try:
        driver.open()
        facts = driver.get_facts()
    except Exception as exc:  # noqa: BLE001
        print(f"ERROR: {exc}", file=sys.stderr)
        sys.exit(1)
    finally:
        driver.close()

    print(json.dumps(facts, indent=2))


if __name__ == "__main__":
    main()
