# api/routes/routes_token.py
from typing import Optional

from fastapi import APIRouter, Header, HTTPException, Request
from pydantic import BaseModel, Field

router = APIRouter(prefix="/v1/token", tags=["token"])


# ---------------------------
# Models
# ---------------------------
class PriceAndInflationBody(BaseModel):
    price: int = Field(ge=0)
    inflation: int = Field(ge=0)


class MintBody(BaseModel):
    recipient: str
    amount: int = Field(ge=0)


class TransferBody(BaseModel):
    recipient: str
    amount: int = Field(ge=0)


class ApproveBody(BaseModel):
    spender: str
    amount: int = Field(ge=0)


class TransferFromBody(BaseModel):
    source: str
    recipient: str
    amount: int = Field(ge=0)


class OwnershipBody(BaseModel):
    new_owner: str


def _service(request: Request):
    return request.app.state.service


def require_caller(x_caller: Optional[str]) -> str:
    if not x_caller or not x_caller.strip():
        raise HTTPException(status_code=401, detail="Missing X-Caller header.")
    return x_caller.strip()


# ---------------------------
# Queries
# ---------------------------
@router.get("")
def token_info(request: Request):
    with _service(request).read() as token:
        return {
            "name": token.name,
            "symbol": token.symbol,
            "decimals": token.decimals,
            "owner": token.owner,
            "inflation_target": token.inflation_target,
            "price": token.price,
            "inflation": token.inflation,
            "total_supply": token.total_supply(),
            "mint_allowed": token.mint_allowed(),
        }


@router.get("/owner")
def get_owner(request: Request):
    with _service(request).read() as token:
        return {"owner": token.owner}


@router.get("/inflation-target")
def get_inflation_target(request: Request):
    with _service(request).read() as token:
        return {"inflation_target": token.inflation_target}


@router.get("/price")
def get_price(request: Request):
    with _service(request).read() as token:
        return {"price": token.price}


@router.get("/inflation")
def get_inflation(request: Request):
    with _service(request).read() as token:
        return {"inflation": token.inflation}


@router.get("/balances/{account}")
def get_balance(account: str, request: Request):
    with _service(request).read() as token:
        return {"account": account, "balance": token.balance_of(account)}


@router.get("/allowances/{owner}/{spender}")
def get_allowance(owner: str, spender: str, request: Request):
    with _service(request).read() as token:
        return {"owner": owner, "spender": spender, "allowance": token.allowance(owner, spender)}


@router.get("/events")
def get_events(request: Request, limit: int = 50):
    limit = max(1, min(limit, 500))
    with _service(request).read() as token:
        events = token.events.tail(limit)
        return {"ok": True, "items": [ev.to_dict() for ev in events]}


# ---------------------------
# Mutations (X-Caller header identifies the caller)
# ---------------------------
@router.post("/price-and-inflation")
def set_price_and_inflation(
    body: PriceAndInflationBody,
    request: Request,
    x_caller: Optional[str] = Header(None),
):
    caller = require_caller(x_caller)
    with _service(request).apply("set_price_and_inflation", {"price": body.price, "inflation": body.inflation}) as token:
        token.set_price_and_inflation(caller, body.price, body.inflation)
        result = {"ok": True, "price": token.price, "inflation": token.inflation}
    return result


@router.post("/mint")
def mint(body: MintBody, request: Request, x_caller: Optional[str] = Header(None)):
    caller = require_caller(x_caller)
    with _service(request).apply("mint", {"recipient": body.recipient, "amount": body.amount}) as token:
        token.mint(caller, body.recipient, body.amount)
        result = {
            "ok": True,
            "recipient": body.recipient,
            "balance": token.balance_of(body.recipient),
            "total_supply": token.total_supply(),
        }
    return result


@router.post("/transfer")
def transfer(body: TransferBody, request: Request, x_caller: Optional[str] = Header(None)):
    caller = require_caller(x_caller)
    payload = {"sender": caller, "recipient": body.recipient, "amount": body.amount}
    with _service(request).apply("transfer", payload) as token:
        token.transfer(caller, body.recipient, body.amount)
        result = {"ok": True, "balance": token.balance_of(caller)}
    return result


@router.post("/approve")
def approve(body: ApproveBody, request: Request, x_caller: Optional[str] = Header(None)):
    caller = require_caller(x_caller)
    payload = {"owner": caller, "spender": body.spender, "amount": body.amount}
    with _service(request).apply("approve", payload) as token:
        token.approve(caller, body.spender, body.amount)
        result = {"ok": True, "allowance": token.allowance(caller, body.spender)}
    return result


@router.post("/transfer-from")
def transfer_from(body: TransferFromBody, request: Request, x_caller: Optional[str] = Header(None)):
    caller = require_caller(x_caller)
    payload = {"spender": caller, "source": body.source, "recipient": body.recipient, "amount": body.amount}
    with _service(request).apply("transfer_from", payload) as token:
        token.transfer_from(caller, body.source, body.recipient, body.amount)
        result = {"ok": True, "allowance": token.allowance(body.source, caller)}
    return result


@router.post("/ownership")
def transfer_ownership(body: OwnershipBody, request: Request, x_caller: Optional[str] = Header(None)):
    caller = require_caller(x_caller)
    with _service(request).apply("transfer_ownership", {"new_owner": body.new_owner}) as token:
        token.transfer_ownership(caller, body.new_owner)
        result = {"ok": True, "owner": token.owner}
    return result
