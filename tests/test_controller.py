import pytest

from issuance.controller import InflationToken
from issuance.errors import InflationTooHigh, InvalidAddress, SupplyOverflow, Unauthorized, ValueOutOfRange
from ledger.event_log import EVT_OWNERSHIP_TRANSFERRED, EVT_TRANSFER
from ledger.fungible_ledger import UINT256_MAX, ZERO_ADDRESS

ADDR1 = "0x" + "b" * 40
ADDR2 = "0x" + "c" * 40


def test_deployment_sets_owner_and_target(token, owner):
    assert token.owner == owner
    assert token.inflation_target == 2
    assert token.price == 0
    assert token.inflation == 0
    assert token.total_supply() == 0


def test_deployment_announces_owner(token, owner):
    events = token.events.by_name(EVT_OWNERSHIP_TRANSFERRED)
    assert len(events) == 1
    assert events[0].args == {"previous_owner": ZERO_ADDRESS, "new_owner": owner}


def test_negative_target_rejected(owner):
    with pytest.raises(ValueOutOfRange):
        InflationToken(inflation_target=-1, deployer=owner)


def test_owner_sets_price_and_inflation(token, owner):
    token.set_price_and_inflation(owner, 1000, 1)
    assert token.price == 1000
    assert token.inflation == 1


def test_owner_may_report_inflation_above_target(token, owner):
    token.set_price_and_inflation(owner, 5, 10_000)
    assert token.inflation == 10_000
    assert not token.mint_allowed()


def test_set_price_and_inflation_is_idempotent(token, owner):
    token.set_price_and_inflation(owner, 1000, 2)
    once = token.snapshot()
    token.set_price_and_inflation(owner, 1000, 2)
    assert token.snapshot() == once


def test_non_owner_cannot_set_price_and_inflation(token):
    with pytest.raises(Unauthorized, match="Ownable: caller is not the owner"):
        token.set_price_and_inflation(ADDR1, 1000, 1)
    assert token.price == 0
    assert token.inflation == 0


def test_non_owner_cannot_mint(token, owner):
    token.set_price_and_inflation(owner, 1000, 1)
    events_before = len(token.events)
    with pytest.raises(Unauthorized):
        token.mint(ADDR1, ADDR1, 1000)
    assert token.balance_of(ADDR1) == 0
    assert token.total_supply() == 0
    assert len(token.events) == events_before


def test_owner_check_comes_before_mint_gate(token, owner):
    token.set_price_and_inflation(owner, 1000, 3)
    with pytest.raises(Unauthorized):
        token.mint(ADDR1, ADDR1, 1000)
    assert token.balance_of(ADDR1) == 0


def test_owner_check_comes_before_argument_validation(token):
    with pytest.raises(Unauthorized):
        token.set_price_and_inflation(ADDR1, -1, UINT256_MAX + 1)
    assert (token.price, token.inflation) == (0, 0)


def test_mint_blocked_when_inflation_above_target(token, owner):
    token.set_price_and_inflation(owner, 1000, 3)
    with pytest.raises(InflationTooHigh, match="Minting is disabled due to high inflation."):
        token.mint(owner, ADDR1, 1000)
    assert token.balance_of(ADDR1) == 0


def test_mint_allowed_at_and_below_target(token, owner):
    token.set_price_and_inflation(owner, 1000, 2)
    token.mint(owner, ADDR1, 1000)
    assert token.balance_of(ADDR1) == 1000

    token.set_price_and_inflation(owner, 1000, 1)
    token.mint(owner, ADDR1, 1000)
    assert token.balance_of(ADDR1) == 2000
    assert token.total_supply() == 2000


def test_mint_allowed_before_any_update(token, owner):
    token.mint(owner, ADDR1, 5)
    assert token.balance_of(ADDR1) == 5


@pytest.mark.parametrize("inflation,allowed", [(0, True), (1, True), (2, True), (3, False), (99, False)])
def test_gate_is_inflation_at_most_target(token, owner, inflation, allowed):
    token.set_price_and_inflation(owner, 1, inflation)
    assert token.mint_allowed() is allowed
    if allowed:
        token.mint(owner, ADDR1, 1)
        assert token.balance_of(ADDR1) == 1
    else:
        with pytest.raises(InflationTooHigh):
            token.mint(owner, ADDR1, 1)


def test_gate_reads_latest_inflation(token, owner):
    token.set_price_and_inflation(owner, 1000, 3)
    with pytest.raises(InflationTooHigh):
        token.mint(owner, ADDR1, 10)

    token.set_price_and_inflation(owner, 1000, 2)
    token.mint(owner, ADDR1, 10)

    token.set_price_and_inflation(owner, 1000, 4)
    with pytest.raises(InflationTooHigh):
        token.mint(owner, ADDR1, 10)
    assert token.balance_of(ADDR1) == 10


def test_mint_does_not_touch_price_or_inflation(token, owner):
    token.set_price_and_inflation(owner, 777, 1)
    token.mint(owner, ADDR1, 1000)
    assert (token.price, token.inflation) == (777, 1)


def test_mint_emits_transfer_from_zero(token, owner):
    token.mint(owner, ADDR1, 42)
    ev = token.events.by_name(EVT_TRANSFER)[-1]
    assert ev.args == {"sender": ZERO_ADDRESS, "recipient": ADDR1, "amount": 42}


def test_ledger_errors_propagate_unchanged(token, owner):
    with pytest.raises(InvalidAddress):
        token.mint(owner, ZERO_ADDRESS, 1)
    with pytest.raises(ValueOutOfRange):
        token.mint(owner, ADDR1, -5)


def test_failed_price_update_is_rolled_back(token, owner):
    token.set_price_and_inflation(owner, 10, 1)
    with pytest.raises(ValueOutOfRange):
        token.set_price_and_inflation(owner, 20, UINT256_MAX + 1)
    assert (token.price, token.inflation) == (10, 1)


def test_failed_mint_leaves_supply_and_events(token, owner):
    token.mint(owner, ADDR1, UINT256_MAX)
    events_before = len(token.events)
    with pytest.raises(SupplyOverflow):
        token.mint(owner, ADDR2, 1)
    assert token.total_supply() == UINT256_MAX
    assert token.balance_of(ADDR2) == 0
    assert len(token.events) == events_before


def test_transfer_ownership_moves_gate(token, owner):
    token.transfer_ownership(owner, ADDR1)
    assert token.owner == ADDR1
    assert token.is_owner(ADDR1)
    assert not token.is_owner(owner)

    with pytest.raises(Unauthorized):
        token.set_price_and_inflation(owner, 1, 1)
    token.set_price_and_inflation(ADDR1, 1, 1)
    assert token.price == 1


def test_transfer_ownership_requires_owner(token, owner):
    with pytest.raises(Unauthorized):
        token.transfer_ownership(ADDR1, ADDR1)
    assert token.owner == owner


def test_transfer_ownership_to_zero_rejected(token, owner):
    events_before = len(token.events)
    with pytest.raises(InvalidAddress):
        token.transfer_ownership(owner, ZERO_ADDRESS)
    assert token.owner == owner
    assert len(token.events) == events_before


def test_holder_operations_go_through_ledger(token, owner):
    token.mint(owner, ADDR1, 100)
    token.transfer(ADDR1, ADDR2, 30)
    token.approve(ADDR2, ADDR1, 10)
    token.transfer_from(ADDR1, ADDR2, owner, 10)
    assert token.balance_of(ADDR1) == 70
    assert token.balance_of(ADDR2) == 20
    assert token.balance_of(owner) == 10
    assert token.allowance(ADDR2, ADDR1) == 0


def test_snapshot_round_trip_keeps_state_and_events(token, owner):
    token.set_price_and_inflation(owner, 1000, 2)
    token.mint(owner, ADDR1, 500)
    token.approve(ADDR1, ADDR2, 50)
    token.transfer_ownership(owner, ADDR2)

    restored = InflationToken.from_snapshot(token.snapshot())

    assert restored.snapshot() == token.snapshot()
    assert restored.owner == ADDR2
    assert restored.inflation_target == 2
    assert restored.allowance(ADDR1, ADDR2) == 50
    assert len(restored.events) == len(token.events)
