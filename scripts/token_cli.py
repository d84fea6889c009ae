#!/usr/bin/env python3
"""
InflationToken CLI

Thin client over the InflationToken HTTP API. Examples:

    token_cli.py --caller 0xOwner set-price-inflation 1000 2
    token_cli.py --caller 0xOwner mint 0xAlice 1000
    token_cli.py balance 0xAlice
    token_cli.py status

The API base URL comes from --api or INFLATION_TOKEN_API
(default http://localhost:8000).
"""

from __future__ import annotations

import argparse
import json
import os
import sys
from typing import Any, Dict, List, Optional

import requests

DEFAULT_API = "http://localhost:8000"
TIMEOUT = 20


class ApiError(RuntimeError):
    pass


class TokenClient:
    def __init__(self, base_url: str, caller: Optional[str] = None, session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/")
        self.caller = caller
        self.session = session or requests.Session()

    def _handle(self, resp: requests.Response) -> Dict[str, Any]:
        try:
            body = resp.json()
        except ValueError:
            body = {"detail": resp.text[:500]}
        if resp.status_code >= 400:
            detail = body.get("detail") if isinstance(body, dict) else body
            raise ApiError(f"HTTP {resp.status_code}: {detail}")
        return body

    def get(self, path: str, **params: Any) -> Dict[str, Any]:
        resp = self.session.get(f"{self.base_url}{path}", params=params or None, timeout=TIMEOUT)
        return self._handle(resp)

    def post(self, path: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        if not self.caller:
            raise ApiError("--caller is required for this command")
        headers = {"X-Caller": self.caller}
        resp = self.session.post(f"{self.base_url}{path}", json=payload, headers=headers, timeout=TIMEOUT)
        return self._handle(resp)


def run_command(client: TokenClient, args: argparse.Namespace) -> Dict[str, Any]:
    cmd = args.command
    if cmd == "status":
        return client.get("/v1/token")
    if cmd == "balance":
        return client.get(f"/v1/token/balances/{args.account}")
    if cmd == "events":
        return client.get("/v1/token/events", limit=args.limit)
    if cmd == "set-price-inflation":
        return client.post("/v1/token/price-and-inflation", {"price": args.price, "inflation": args.inflation})
    if cmd == "mint":
        return client.post("/v1/token/mint", {"recipient": args.recipient, "amount": args.amount})
    if cmd == "transfer":
        return client.post("/v1/token/transfer", {"recipient": args.recipient, "amount": args.amount})
    if cmd == "approve":
        return client.post("/v1/token/approve", {"spender": args.spender, "amount": args.amount})
    if cmd == "transfer-from":
        return client.post(
            "/v1/token/transfer-from",
            {"source": args.source, "recipient": args.recipient, "amount": args.amount},
        )
    if cmd == "transfer-ownership":
        return client.post("/v1/token/ownership", {"new_owner": args.new_owner})
    raise SystemExit(f"Unknown command: {cmd}")


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="InflationToken API client.")
    ap.add_argument("--api", default=os.getenv("INFLATION_TOKEN_API", DEFAULT_API))
    ap.add_argument("--caller", default=os.getenv("INFLATION_TOKEN_CALLER"), help="Caller identity (X-Caller).")
    sub = ap.add_subparsers(dest="command", required=True)

    sub.add_parser("status")

    p = sub.add_parser("balance")
    p.add_argument("account")

    p = sub.add_parser("events")
    p.add_argument("--limit", type=int, default=20)

    p = sub.add_parser("set-price-inflation")
    p.add_argument("price", type=int)
    p.add_argument("inflation", type=int)

    p = sub.add_parser("mint")
    p.add_argument("recipient")
    p.add_argument("amount", type=int)

    p = sub.add_parser("transfer")
    p.add_argument("recipient")
    p.add_argument("amount", type=int)

    p = sub.add_parser("approve")
    p.add_argument("spender")
    p.add_argument("amount", type=int)

    p = sub.add_parser("transfer-from")
    p.add_argument("source")
    p.add_argument("recipient")
    p.add_argument("amount", type=int)

    p = sub.add_parser("transfer-ownership")
    p.add_argument("new_owner")

    return ap


def main(argv: List[str] | None = None, session: Optional[requests.Session] = None) -> int:
    args = build_parser().parse_args(argv)
    client = TokenClient(args.api, args.caller, session=session)
    try:
        result = run_command(client, args)
    except ApiError as e:
        print(f"[token_cli] {e}")
        return 1
    except requests.RequestException as e:
        print(f"[token_cli] Request failed: {e}")
        return 1
    print(json.dumps(result, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
