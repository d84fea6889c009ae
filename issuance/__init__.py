"""
InflationToken issuance package

Provides:
- AccessControl: single-owner gate for every mutating call
- InflationToken: price / inflation state and the inflation-gated mint
- TokenStateStore: snapshot persistence (Redis or memory)
- errors: the TokenError taxonomy

Import the submodules directly (issuance.controller, issuance.errors, ...);
this file only marks 'issuance' as a package.
"""
