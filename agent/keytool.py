"""Helpers for preparing encrypted Cloudflare API keys.

    cloudflare-ddns-key genkey            # prints a new DDNS_MASTER_KEY
    cloudflare-ddns-key encrypt           # prompts for the API key, prints
                                          # the encryptedAuthKey token
"""

from __future__ import annotations

import argparse
import getpass
import os
import sys
from typing import List, Optional

from shared_lib.security import CryptoManager


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="cloudflare-ddns-key",
        description="Generate DDNS_MASTER_KEY values and encryptedAuthKey tokens.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("genkey", help="print a new master key")
    encrypt = subparsers.add_parser(
        "encrypt",
        help="encrypt a Cloudflare API key with DDNS_MASTER_KEY",
    )
    encrypt.add_argument(
        "--stdin",
        action="store_true",
        help="read the API key from stdin instead of prompting",
    )
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_arguments(argv)

    if args.command == "genkey":
        print(CryptoManager.generate_key())
        return 0

    master_key = os.environ.get("DDNS_MASTER_KEY")
    if not master_key:
        print("DDNS_MASTER_KEY is required to encrypt an API key", file=sys.stderr)
        return 1
    try:
        crypto = CryptoManager(master_key)
    except ValueError as exc:
        print(str(exc), file=sys.stderr)
        return 1

    if args.stdin:
        api_key = sys.stdin.readline().strip()
    else:
        api_key = getpass.getpass("Cloudflare API key: ").strip()
    if not api_key:
        print("API key must not be empty", file=sys.stderr)
        return 1

    print(crypto.encrypt_str(api_key))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
