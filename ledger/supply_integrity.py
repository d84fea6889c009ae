#!/usr/bin/env python3
"""
InflationToken Supply Integrity Check

- Loads a token snapshot (from the configured state store, or a JSON file
  given with --snapshot)
- Validates:
    * total supply == sum of balances
    * balances and allowances inside the uint256 range
    * replaying the Transfer events reproduces every balance
- Emits a human-readable report in:
    reports/supply/supply_integrity_YYYY-MM-DD.md

This is read-only: it never modifies the token state, only reports.
"""

from __future__ import annotations
import argparse
import json
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

from core.config import load_settings
from core.log import configure_logging
from issuance.store import TokenStateStore
from ledger.event_log import EVT_TRANSFER
from ledger.fungible_ledger import UINT256_MAX, ZERO_ADDRESS

ROOT = Path(__file__).resolve().parents[1]
REPORT_DIR = ROOT / "reports" / "supply"


def in_range(x: Any) -> bool:
    return isinstance(x, int) and not isinstance(x, bool) and 0 <= x <= UINT256_MAX


def replay_transfers(events: List[Dict[str, Any]]) -> Dict[str, int]:
    balances: Dict[str, int] = {}
    for ev in events:
        if ev.get("name") != EVT_TRANSFER:
            continue
        args = ev.get("args") or {}
        amount = int(args.get("amount", 0))
        sender = args.get("sender")
        recipient = args.get("recipient")
        if sender and sender != ZERO_ADDRESS:
            balances[sender] = balances.get(sender, 0) - amount
        if recipient:
            balances[recipient] = balances.get(recipient, 0) + amount
    return balances


def analyze_snapshot(snapshot: Dict[str, Any]) -> Dict[str, Any]:
    ledger = snapshot.get("ledger") or {}
    balances: Dict[str, Any] = ledger.get("balances") or {}
    allowances: List[Dict[str, Any]] = ledger.get("allowances") or []
    total_supply = ledger.get("total_supply", 0)
    events = snapshot.get("events") or []

    errors: List[str] = []

    bad_balances = [acct for acct, amt in balances.items() if not in_range(amt)]
    for acct in bad_balances:
        errors.append(f"- balance of `{acct}` out of range: {balances[acct]!r}")

    bad_allowances = [a for a in allowances if not in_range(a.get("amount"))]
    for a in bad_allowances:
        errors.append(
            f"- allowance `{a.get('owner')}` -> `{a.get('spender')}` out of range: {a.get('amount')!r}"
        )

    balance_sum = sum(amt for amt in balances.values() if in_range(amt))
    if not in_range(total_supply):
        errors.append(f"- total supply out of range: {total_supply!r}")
    elif balance_sum != total_supply:
        errors.append(f"- total supply {total_supply} != sum of balances {balance_sum}")

    replayed = replay_transfers(events)
    replay_mismatches = 0
    for acct in sorted(set(replayed) | set(balances)):
        expected = replayed.get(acct, 0)
        actual = balances.get(acct, 0)
        if expected != actual:
            replay_mismatches += 1
            errors.append(f"- `{acct}` balance {actual!r} but Transfer events give {expected}")

    minted = sum(
        int((ev.get("args") or {}).get("amount", 0))
        for ev in events
        if ev.get("name") == EVT_TRANSFER and (ev.get("args") or {}).get("sender") == ZERO_ADDRESS
    )

    return {
        "summary": {
            "accounts": len(balances),
            "events": len(events),
            "total_supply": total_supply,
            "balance_sum": balance_sum,
            "minted_by_events": minted,
            "bad_balances": len(bad_balances),
            "bad_allowances": len(bad_allowances),
            "replay_mismatches": replay_mismatches,
        },
        "errors": errors,
        "ok": not errors,
        "generated_at": datetime.now(timezone.utc).isoformat(),
    }


def write_report(result: Dict[str, Any], report_dir: Path = REPORT_DIR) -> Path:
    report_dir.mkdir(parents=True, exist_ok=True)
    today = datetime.now(timezone.utc).strftime("%Y-%m-%d")
    out = report_dir / f"supply_integrity_{today}.md"

    s = result["summary"]
    lines: List[str] = []

    lines.append("# InflationToken Supply Integrity Report")
    lines.append("")
    lines.append(f"- Generated at: `{result['generated_at']}`")
    lines.append("")
    lines.append("## Summary")
    lines.append(f"- Accounts: **{s['accounts']}**")
    lines.append(f"- Events: **{s['events']}**")
    lines.append(f"- Total supply: **{s['total_supply']}**")
    lines.append(f"- Sum of balances: **{s['balance_sum']}**")
    lines.append(f"- Minted (from events): **{s['minted_by_events']}**")
    lines.append(f"- Out-of-range balances: **{s['bad_balances']}**")
    lines.append(f"- Out-of-range allowances: **{s['bad_allowances']}**")
    lines.append(f"- Replay mismatches: **{s['replay_mismatches']}**")
    lines.append("")

    lines.append("## Detected Issues")
    if result["errors"]:
        lines.extend(result["errors"])
    else:
        lines.append("- No integrity issues detected.")
    lines.append("")

    out.write_text("\n".join(lines), encoding="utf-8")
    return out


def load_snapshot(path: Optional[str]) -> Optional[Dict[str, Any]]:
    if path:
        return json.loads(Path(path).read_text(encoding="utf-8"))
    settings = load_settings()
    return TokenStateStore(settings.redis_url).load_snapshot()


def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(description="Check InflationToken supply integrity.")
    ap.add_argument("--snapshot", help="Path to a snapshot JSON file (default: state store).")
    ap.add_argument("--report-dir", default=str(REPORT_DIR))
    args = ap.parse_args(argv)

    configure_logging(load_settings().log_level)
    snapshot = load_snapshot(args.snapshot)
    if snapshot is None:
        print("[supply_integrity] No token snapshot found.")
        return 1

    result = analyze_snapshot(snapshot)
    report_path = write_report(result, Path(args.report_dir))
    print(json.dumps({"report": str(report_path), "ok": result["ok"], "summary": result["summary"]}, indent=2))
    return 0 if result["ok"] else 2


if __name__ == "__main__":
    sys.exit(main())
