"""
InflationToken error taxonomy.

Every failure raised by the token is a TokenError with a stable `kind`
string, so the HTTP layer and the CLI can report it without knowing the
concrete class.
"""

from __future__ import annotations


class TokenError(Exception):
    kind = "token_error"
    default_message = "Token operation failed."

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)

    @property
    def message(self) -> str:
        return str(self.args[0])


class Unauthorized(TokenError):
    kind = "unauthorized"
    default_message = "Ownable: caller is not the owner"


class InflationTooHigh(TokenError):
    kind = "inflation_too_high"
    default_message = "Minting is disabled due to high inflation."


# ---------------------------
# Ledger failures
# ---------------------------
class LedgerError(TokenError):
    kind = "ledger_error"


class InvalidAddress(LedgerError):
    kind = "invalid_address"
    default_message = "Invalid account address."


class ValueOutOfRange(LedgerError):
    kind = "value_out_of_range"
    default_message = "Value must be an unsigned 256-bit integer."


class SupplyOverflow(LedgerError):
    kind = "supply_overflow"
    default_message = "Total supply would exceed the uint256 range."


class InsufficientBalance(LedgerError):
    kind = "insufficient_balance"
    default_message = "Transfer amount exceeds balance."


class InsufficientAllowance(LedgerError):
    kind = "insufficient_allowance"
    default_message = "Insufficient allowance."
