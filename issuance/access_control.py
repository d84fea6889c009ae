"""
Single-owner access control.

The token embeds one AccessControl value. Every mutating entry point calls
`require_owner` before it reads or writes anything else.
"""

from __future__ import annotations
import logging

from issuance.errors import Unauthorized
from ledger.event_log import EVT_OWNERSHIP_TRANSFERRED, EventLog
from ledger.fungible_ledger import ZERO_ADDRESS, require_address

logger = logging.getLogger(__name__)


class AccessControl:
    def __init__(self, owner: str, events: EventLog) -> None:
        self._owner = require_address(owner, "owner")
        self._events = events
        self._events.emit(EVT_OWNERSHIP_TRANSFERRED, previous_owner=ZERO_ADDRESS, new_owner=owner)

    @property
    def owner(self) -> str:
        return self._owner

    def is_owner(self, caller: str) -> bool:
        return caller == self._owner

    def require_owner(self, caller: str) -> None:
        if not self.is_owner(caller):
            logger.warning("Rejected call from non-owner %s", caller)
            raise Unauthorized()

    def transfer_ownership(self, caller: str, new_owner: str) -> None:
        self.require_owner(caller)
        require_address(new_owner, "new owner")
        previous = self._owner
        self._owner = new_owner
        self._events.emit(EVT_OWNERSHIP_TRANSFERRED, previous_owner=previous, new_owner=new_owner)
        logger.info("Ownership transferred from %s to %s", previous, new_owner)

    def _restore(self, owner: str) -> None:
        self._owner = owner
