"""
InflationToken issuance controller

Holds the economic state of the token:
- inflation_target (fixed at construction)
- price and inflation (set together by the owner)

and the mint gate: minting is allowed while inflation <= inflation_target.
The gate is evaluated on every mint against the stored inflation; nothing
is cached, so lowering inflation re-enables minting on the next call.

Balances, supply and allowances live in the FungibleLedger. Every mutating
call runs inside `_transaction()`: if anything raises, all writes of that
call (fields, ledger, emitted events) are rolled back before the error
propagates.
"""

from __future__ import annotations
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional
import logging

from issuance.access_control import AccessControl
from issuance.errors import InflationTooHigh
from ledger.event_log import EventLog, TokenEvent
from ledger.fungible_ledger import FungibleLedger, require_uint256

logger = logging.getLogger(__name__)

DEFAULT_NAME = "InflationToken"
DEFAULT_SYMBOL = "INF"
DEFAULT_DECIMALS = 18


class InflationToken:
    def __init__(
        self,
        inflation_target: int,
        deployer: str,
        name: str = DEFAULT_NAME,
        symbol: str = DEFAULT_SYMBOL,
        decimals: int = DEFAULT_DECIMALS,
        ledger: Optional[FungibleLedger] = None,
    ) -> None:
        self._inflation_target = require_uint256(inflation_target, "inflation target")
        self.name = name
        self.symbol = symbol
        self.decimals = decimals
        self.ledger = ledger if ledger is not None else FungibleLedger()
        self.access = AccessControl(deployer, self.ledger.events)
        self._price = 0
        self._inflation = 0
        logger.info(
            "Deployed %s (%s) owner=%s inflation_target=%s",
            name, symbol, deployer, self._inflation_target,
        )

    # ------------------------------------------------------------------ #
    # Views
    # ------------------------------------------------------------------ #
    @property
    def owner(self) -> str:
        return self.access.owner

    @property
    def inflation_target(self) -> int:
        return self._inflation_target

    @property
    def price(self) -> int:
        return self._price

    @property
    def inflation(self) -> int:
        return self._inflation

    @property
    def events(self) -> EventLog:
        return self.ledger.events

    def is_owner(self, caller: str) -> bool:
        return self.access.is_owner(caller)

    def mint_allowed(self) -> bool:
        return self._inflation <= self._inflation_target

    def balance_of(self, account: str) -> int:
        return self.ledger.balance_of(account)

    def total_supply(self) -> int:
        return self.ledger.total_supply()

    def allowance(self, owner: str, spender: str) -> int:
        return self.ledger.allowance(owner, spender)

    # ------------------------------------------------------------------ #
    # Owner-only operations
    # ------------------------------------------------------------------ #
    def set_price_and_inflation(self, caller: str, new_price: int, new_inflation: int) -> None:
        self.access.require_owner(caller)
        with self._transaction():
            require_uint256(new_price, "price")
            require_uint256(new_inflation, "inflation")
            self._price = new_price
            self._inflation = new_inflation
        logger.info("Price set to %s, inflation set to %s", new_price, new_inflation)

    def mint(self, caller: str, recipient: str, amount: int) -> None:
        self.access.require_owner(caller)
        with self._transaction():
            if self._inflation > self._inflation_target:
                logger.warning(
                    "Mint refused: inflation %s > target %s",
                    self._inflation, self._inflation_target,
                )
                raise InflationTooHigh()
            self.ledger.mint(recipient, amount)

    def transfer_ownership(self, caller: str, new_owner: str) -> None:
        with self._transaction():
            self.access.transfer_ownership(caller, new_owner)

    # ------------------------------------------------------------------ #
    # Holder operations
    # ------------------------------------------------------------------ #
    def transfer(self, caller: str, recipient: str, amount: int) -> None:
        with self._transaction():
            self.ledger.transfer(caller, recipient, amount)

    def approve(self, caller: str, spender: str, amount: int) -> None:
        with self._transaction():
            self.ledger.approve(caller, spender, amount)

    def transfer_from(self, caller: str, source: str, recipient: str, amount: int) -> None:
        with self._transaction():
            self.ledger.transfer_from(caller, source, recipient, amount)

    # ------------------------------------------------------------------ #
    # Transactions
    # ------------------------------------------------------------------ #
    @contextmanager
    def _transaction(self) -> Iterator[None]:
        saved_fields = (self._price, self._inflation, self.access.owner)
        saved_ledger = self.ledger.snapshot()
        saved_events = len(self.events)
        try:
            yield
        except Exception:
            self._price, self._inflation, owner = saved_fields
            self.access._restore(owner)
            self.ledger.restore(saved_ledger)
            self.events.truncate(saved_events)
            raise

    # ------------------------------------------------------------------ #
    # Snapshots
    # ------------------------------------------------------------------ #
    def snapshot(self, include_events: bool = True) -> Dict[str, Any]:
        data = {
            "name": self.name,
            "symbol": self.symbol,
            "decimals": self.decimals,
            "owner": self.owner,
            "inflation_target": self._inflation_target,
            "price": self._price,
            "inflation": self._inflation,
            "ledger": self.ledger.snapshot(),
        }
        if include_events:
            data["events"] = [ev.to_dict() for ev in self.events.all_events()]
        return data

    @classmethod
    def from_snapshot(cls, data: Dict[str, Any]) -> "InflationToken":
        events: List[TokenEvent] = [TokenEvent.from_dict(e) for e in data.get("events") or []]
        log = EventLog(events)
        ledger = FungibleLedger(log)
        ledger.restore(data.get("ledger") or {})

        token = cls(
            inflation_target=int(data["inflation_target"]),
            deployer=str(data["owner"]),
            name=str(data.get("name", DEFAULT_NAME)),
            symbol=str(data.get("symbol", DEFAULT_SYMBOL)),
            decimals=int(data.get("decimals", DEFAULT_DECIMALS)),
            ledger=ledger,
        )
        # constructing re-announces the owner; the snapshot already has it
        log.truncate(len(events))
        token._price = require_uint256(int(data.get("price", 0)), "price")
        token._inflation = require_uint256(int(data.get("inflation", 0)), "inflation")
        return token
