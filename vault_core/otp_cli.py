#!/usr/bin/env python3
"""
otp_cli.py — Command line front end for the TOTP vault

Subcommands:
- add        : store an entry (Base32 secret or otpauth:// URI)
- remove     : delete an entry
- list       : print stored entry names
- codes      : print the current code of every entry (--watch to refresh)
- parse-uri  : show what an otpauth:// URI contains
- new-secret : print a fresh random Base32 secret
- serve      : run the Flask backend
"""

import argparse
import logging
import sys
import time
from typing import List, Optional

from vault_database import db_manager

from . import base32
from .entries import render_entries, resolve_entry
from .errors import VaultError
from .provisioning import parse_uri

logger = logging.getLogger(__name__)


# --- CLI command handlers ---
def cmd_add(args) -> int:
    try:
        name, secret = resolve_entry(args.name, args.secret)
    except VaultError as e:
        print(f"[!] Error adding key: {e}", file=sys.stderr)
        return 1
    ok, message = db_manager.add_account(name, secret, args.db)
    if not ok:
        print(f"[!] {message}", file=sys.stderr)
        return 1
    print(f"[+] Key '{name}' added successfully!")
    return 0


def cmd_remove(args) -> int:
    if not db_manager.delete_account(args.name, args.db):
        print(f"[!] Account '{args.name}' not found.", file=sys.stderr)
        return 1
    print(f"[+] Key '{args.name}' deleted.")
    return 0


def cmd_list(args) -> int:
    for name in db_manager.list_accounts(args.db):
        print(name)
    return 0


def _print_codes(db_path: Optional[str], now: float) -> None:
    for row in render_entries(db_manager.list_accounts(db_path), now):
        if row.ok:
            print(f"{row.name}: {row.code}  (valid ~{row.remaining:2d}s)")
        else:
            print(f"{row.name}: {row.error}")


def cmd_codes(args) -> int:
    if not args.watch:
        _print_codes(args.db, time.time())
        return 0

    print("Press Ctrl+C to quit. Refreshing at every 30s boundary...\n")
    last_step = None
    try:
        while True:
            now = time.time()
            step = int(now // 30)
            if step != last_step:
                _print_codes(args.db, now)
                print()
                last_step = step
            time.sleep(1)
    except KeyboardInterrupt:
        print("\nBye.")
    return 0


def cmd_parse_uri(args) -> int:
    try:
        parsed = parse_uri(args.uri)
    except VaultError as e:
        print(f"[!] Invalid otpauth URL: {e}", file=sys.stderr)
        return 1
    print(f"label:   {parsed.label}")
    print(f"issuer:  {parsed.display_issuer or '-'}")
    print(f"account: {parsed.account_name}")
    print(f"secret:  {'present' if parsed.secret else 'missing'}")
    return 0


def cmd_new_secret(args) -> int:
    print(base32.generate_secret(args.bytes))
    return 0


def cmd_serve(args) -> int:
    from vault_backend import config
    from vault_backend.app import create_app

    overrides = {"VAULT_DATABASE": args.db} if args.db else None
    app = create_app(overrides)
    app.run(host=args.host or config.VAULT_HOST, port=args.port or config.VAULT_PORT)
    return 0


# --- Argparse builder ---
def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="vault-cli", description="Personal TOTP vault")
    p.add_argument("--db", default=None, help="Path to the sqlite database (default: $VAULT_DATABASE)")
    p.add_argument("--verbose", action="store_true", help="Verbose output")
    sub = p.add_subparsers(dest="cmd")

    pa = sub.add_parser("add", help="Store a new entry")
    pa.add_argument("name", nargs="?", default="", help="Entry name (optional for otpauth:// URIs)")
    pa.add_argument("secret", help="Base32 secret or otpauth://totp URI")
    pa.set_defaults(func=cmd_add)

    pr = sub.add_parser("remove", help="Delete an entry")
    pr.add_argument("name")
    pr.set_defaults(func=cmd_remove)

    pl = sub.add_parser("list", help="List entry names")
    pl.set_defaults(func=cmd_list)

    pc = sub.add_parser("codes", help="Show current codes")
    pc.add_argument("--watch", action="store_true", help="Keep refreshing at each time step")
    pc.set_defaults(func=cmd_codes)

    pu = sub.add_parser("parse-uri", help="Show the content of an otpauth:// URI")
    pu.add_argument("uri")
    pu.set_defaults(func=cmd_parse_uri)

    pn = sub.add_parser("new-secret", help="Print a random Base32 secret")
    pn.add_argument("--bytes", type=int, default=base32.SECRET_BYTES, help="Secret size in bytes")
    pn.set_defaults(func=cmd_new_secret)

    ps = sub.add_parser("serve", help="Run the Flask backend")
    ps.add_argument("--host", default=None)
    ps.add_argument("--port", type=int, default=None)
    ps.set_defaults(func=cmd_serve)

    return p


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)
    if not hasattr(args, "func"):
        parser.print_help()
        return 2
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
