#!/usr/bin/env python3
"""Log in once and reuse the cached session token from later runs.

The token is written under ``~/.cache/napalm-ngplus`` (or
``NETGEAR_TOKEN_DIR``).  Run the script twice: the second run issues no
login request as long as the switch still accepts the token.

Usage::

    export NETGEAR_HOST="192.168.0.2"
    export NETGEAR_PASSWORD="your-password"
    python examples/token_cache.py            # login or reuse
    python examples/token_cache.py --logout   # forget the token
"""

from __future__ import annotations

import logging
import os
import sys

from napalm_ngplus.client.errors import NGPlusError, SessionExpiredError
from napalm_ngplus.client.session import NGPlusClient
from napalm_ngplus.client.token_store import FileTokenStore
from napalm_ngplus.vendor.netgear.endpoints import Operation


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    host = os.environ.get("NETGEAR_HOST", "")
    if not host:
        print("ERROR: NETGEAR_HOST is not set.", file=sys.stderr)
        sys.exit(1)

    store = FileTokenStore(os.environ.get("NETGEAR_TOKEN_DIR"))
    with NGPlusClient(token_store=store, verify_tls=False) as client:
        try:
            if "--logout" in sys.argv[1:]:
                client.logout(host)
                print(f"Logged out of {host}")
                return
            if client.is_authenticated(host):
                print(f"Reusing cached token for {host} ({store.path_for(host)})")
            else:
                client.login_with_retry(host)
            try:
                page = client.do(host, Operation.DASHBOARD)
            except SessionExpiredError:
                client.clear_token(host)
                client.login_with_retry(host)
                page = client.do(host, Operation.DASHBOARD)
            family = client.family(host)
        except NGPlusError as exc:
            print(f"ERROR: {exc}", file=sys.stderr)
            sys.exit(1)

    print(f"{family.value}: dashboard is {len(page)} bytes")


if __name__ == "__main__":
    main()
