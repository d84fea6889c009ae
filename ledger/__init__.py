"""
InflationToken Ledger Package

Provides:
- FungibleLedger: balances, total supply, allowances
- EventLog: Transfer / Approval / OwnershipTransferred events
- supply_integrity: read-only snapshot checks + markdown report

This file exists so that 'ledger.*' imports work cleanly from the API,
the scripts and the tests.
"""
