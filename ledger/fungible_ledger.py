"""
Fungible token ledger

Balance bookkeeping behind the InflationToken:
- balances per account (unknown accounts read as zero)
- total supply (always the sum of balances)
- allowances for delegated transfers

Arithmetic is checked against the unsigned 256-bit range. Every operation
validates its inputs before writing anything.
"""

from __future__ import annotations
from typing import Any, Dict, List, Optional, Tuple
import logging

from issuance.errors import (
    InsufficientAllowance,
    InsufficientBalance,
    InvalidAddress,
    SupplyOverflow,
    ValueOutOfRange,
)
from ledger.event_log import EVT_APPROVAL, EVT_TRANSFER, EventLog

logger = logging.getLogger(__name__)

UINT256_MAX = (1 << 256) - 1
ZERO_ADDRESS = "0x" + "0" * 40


def require_uint256(value: Any, what: str = "value") -> int:
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueOutOfRange(f"{what} must be an integer, got {value!r}.")
    if value < 0 or value > UINT256_MAX:
        raise ValueOutOfRange(f"{what} must be within [0, 2**256 - 1], got {value}.")
    return value


def require_address(account: Any, what: str = "account") -> str:
    if not isinstance(account, str) or not account.strip():
        raise InvalidAddress(f"{what} must be a non-empty identity.")
    if account.lower() == ZERO_ADDRESS:
        raise InvalidAddress(f"{what} cannot be the zero address.")
    return account


class FungibleLedger:
    def __init__(self, events: Optional[EventLog] = None) -> None:
        self._balances: Dict[str, int] = {}
        self._allowances: Dict[Tuple[str, str], int] = {}
        self._total_supply = 0
        self.events = events if events is not None else EventLog()

    # ------------------------------------------------------------------ #
    # Views
    # ------------------------------------------------------------------ #
    def balance_of(self, account: str) -> int:
        return self._balances.get(account, 0)

    def total_supply(self) -> int:
        return self._total_supply

    def allowance(self, owner: str, spender: str) -> int:
        return self._allowances.get((owner, spender), 0)

    def accounts(self) -> List[str]:
        return sorted(self._balances)

    # ------------------------------------------------------------------ #
    # Mutations
    # ------------------------------------------------------------------ #
    def mint(self, recipient: str, amount: int) -> None:
        require_address(recipient, "recipient")
        require_uint256(amount, "amount")
        new_supply = self._total_supply + amount
        if new_supply > UINT256_MAX:
            raise SupplyOverflow()

        self._total_supply = new_supply
        self._balances[recipient] = self.balance_of(recipient) + amount
        self.events.emit(EVT_TRANSFER, sender=ZERO_ADDRESS, recipient=recipient, amount=amount)
        logger.info("Mint %s to %s (supply=%s)", amount, recipient, new_supply)

    def transfer(self, sender: str, recipient: str, amount: int) -> None:
        require_address(sender, "sender")
        require_address(recipient, "recipient")
        require_uint256(amount, "amount")
        if self.balance_of(sender) < amount:
            raise InsufficientBalance()

        self._move(sender, recipient, amount)
        self.events.emit(EVT_TRANSFER, sender=sender, recipient=recipient, amount=amount)

    def approve(self, owner: str, spender: str, amount: int) -> None:
        require_address(owner, "owner")
        require_address(spender, "spender")
        require_uint256(amount, "amount")
        self._allowances[(owner, spender)] = amount
        self.events.emit(EVT_APPROVAL, owner=owner, spender=spender, amount=amount)

    def transfer_from(self, spender: str, source: str, recipient: str, amount: int) -> None:
        require_address(spender, "spender")
        require_address(source, "source")
        require_address(recipient, "recipient")
        require_uint256(amount, "amount")
        allowed = self.allowance(source, spender)
        if allowed < amount:
            raise InsufficientAllowance()
        if self.balance_of(source) < amount:
            raise InsufficientBalance()

        self._allowances[(source, spender)] = allowed - amount
        self._move(source, recipient, amount)
        self.events.emit(EVT_TRANSFER, sender=source, recipient=recipient, amount=amount)

    def _move(self, sender: str, recipient: str, amount: int) -> None:
        self._balances[sender] = self.balance_of(sender) - amount
        self._balances[recipient] = self.balance_of(recipient) + amount

    # ------------------------------------------------------------------ #
    # Snapshots
    # ------------------------------------------------------------------ #
    def snapshot(self) -> Dict[str, Any]:
        return {
            "total_supply": self._total_supply,
            "balances": dict(self._balances),
            "allowances": [
                {"owner": o, "spender": s, "amount": amt}
                for (o, s), amt in sorted(self._allowances.items())
            ],
        }

    def restore(self, data: Dict[str, Any]) -> None:
        """
        Replace balances, allowances and supply with a snapshot's values.
        The snapshot is taken at face value; use ledger.supply_integrity to
        check one that came from outside.
        """
        self._total_supply = int(data.get("total_supply", 0))
        self._balances = {str(k): int(v) for k, v in (data.get("balances") or {}).items()}
        self._allowances = {
            (str(a["owner"]), str(a["spender"])): int(a["amount"])
            for a in data.get("allowances") or []
        }
