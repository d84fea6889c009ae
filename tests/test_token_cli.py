import json

import pytest
from fastapi.testclient import TestClient

from api.main import create_app
from core.config import Settings
from issuance.store import TokenStateStore
from scripts.token_cli import main

OWNER = "0x" + "a" * 40
ADDR1 = "0x" + "b" * 40
API = "http://testserver"


@pytest.fixture
def session():
    app = create_app(Settings(inflation_target=2, deployer=OWNER), store=TokenStateStore())
    return TestClient(app)


def run(session, capsys, *argv):
    rc = main(["--api", API, *argv], session=session)
    return rc, capsys.readouterr().out


def test_status(session, capsys):
    rc, out = run(session, capsys, "status")
    assert rc == 0
    assert json.loads(out)["owner"] == OWNER


def test_set_then_mint_then_balance(session, capsys):
    rc, _ = run(session, capsys, "--caller", OWNER, "set-price-inflation", "1000", "2")
    assert rc == 0
    rc, _ = run(session, capsys, "--caller", OWNER, "mint", ADDR1, "1000")
    assert rc == 0
    rc, out = run(session, capsys, "balance", ADDR1)
    assert json.loads(out)["balance"] == 1000


def test_blocked_mint_exits_1(session, capsys):
    run(session, capsys, "--caller", OWNER, "set-price-inflation", "1000", "3")
    rc, out = run(session, capsys, "--caller", OWNER, "mint", ADDR1, "1000")
    assert rc == 1
    assert "HTTP 409" in out
    assert "Minting is disabled due to high inflation." in out


def test_non_owner_exits_1(session, capsys):
    rc, out = run(session, capsys, "--caller", ADDR1, "set-price-inflation", "1", "1")
    assert rc == 1
    assert "HTTP 403" in out


def test_mutation_without_caller_exits_1(session, capsys, monkeypatch):
    monkeypatch.delenv("INFLATION_TOKEN_CALLER", raising=False)
    rc, out = run(session, capsys, "mint", ADDR1, "1")
    assert rc == 1
    assert "--caller is required" in out


def test_transfer_ownership_and_events(session, capsys):
    rc, out = run(session, capsys, "--caller", OWNER, "transfer-ownership", ADDR1)
    assert rc == 0
    assert json.loads(out)["owner"] == ADDR1
    rc, out = run(session, capsys, "events", "--limit", "5")
    names = [ev["name"] for ev in json.loads(out)["items"]]
    assert names == ["OwnershipTransferred", "OwnershipTransferred"]
