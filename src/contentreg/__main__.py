from __future__ import annotations

import argparse
import logging
import time

from .runtime.server import RegistryServer, run


def main() -> None:
    p = argparse.ArgumentParser(prog="contentreg", description="contentreg: content-ownership registry server")
    p.add_argument("--host", default="127.0.0.1")
    p.add_argument("--port", type=int, default=8000)
    p.add_argument("--admin", default=None, help="admin principal (default: $CONTENTREG_ADMIN or 'admin')")
    p.add_argument("--rule", default=None, help="initial validation rule (default: $CONTENTREG_RULE or empty)")
    p.add_argument("--no-gate", action="store_true", help="accept every fingerprint regardless of the rule")
    p.add_argument("--log-level", default="info")
    args = p.parse_args()

    logging.basicConfig(level=args.log_level.upper(), format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    srv = run(
        host=args.host,
        port=args.port,
        admin=args.admin,
        rule=args.rule,
        gated=False if args.no_gate else None,
        log_level=args.log_level,
    )
    print(srv.url if isinstance(srv, RegistryServer) else srv.base_url)

    # Block forever (so it behaves like a normal CLI server)
    while True:
        time.sleep(3600)


if __name__ == "__main__":
    main()
