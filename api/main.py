import logging
import threading
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.routes.routes_token import router as token_router
from core.config import Settings, load_settings
from core.log import configure_logging
from issuance.controller import InflationToken
from issuance.errors import InflationTooHigh, TokenError, Unauthorized
from issuance.store import TokenStateStore

logger = logging.getLogger(__name__)


# ---------------------------
# Service: one token instance, serialized mutations, persisted snapshots
# ---------------------------
class TokenService:
    def __init__(self, settings: Settings, store: Optional[TokenStateStore] = None) -> None:
        self.settings = settings
        self.store = store or TokenStateStore(settings.redis_url)
        self._lock = threading.Lock()
        self._persisted_events = 0
        self.token = self._load_or_deploy()

    def _load_or_deploy(self) -> InflationToken:
        snapshot = self.store.load_snapshot()
        if snapshot is not None:
            logger.info("Restored token state from %s storage", self.store.backend)
            token = InflationToken.from_snapshot(snapshot)
            self._persisted_events = len(token.events)
            return token
        token = InflationToken(
            inflation_target=self.settings.inflation_target,
            deployer=self.settings.deployer,
            name=self.settings.token_name,
            symbol=self.settings.token_symbol,
            decimals=self.settings.token_decimals,
        )
        self._persist(token)
        self.store.audit("deploy", {"owner": token.owner, "inflation_target": token.inflation_target})
        return token

    def _persist(self, token: InflationToken) -> None:
        new_events = token.events.since(self._persisted_events)
        self.store.append_events([ev.to_dict() for ev in new_events])
        self.store.save_state(token.snapshot(include_events=False))
        self._persisted_events += len(new_events)

    @contextmanager
    def read(self) -> Iterator[InflationToken]:
        """Query the token against the latest committed state."""
        with self._lock:
            yield self.token

    @contextmanager
    def apply(self, event: str, payload: Dict[str, Any]) -> Iterator[InflationToken]:
        """
        Run one mutation against the token. State and new events are only
        persisted (and the audit entry written) when the mutation succeeds.
        Build the response inside the block so it reflects this mutation.
        """
        with self._lock:
            yield self.token
            self._persist(self.token)
            self.store.audit(event, payload)


# ---------------------------
# App
# ---------------------------
def create_app(settings: Optional[Settings] = None, store: Optional[TokenStateStore] = None) -> FastAPI:
    settings = settings or load_settings()

    app = FastAPI(
        title="InflationToken-API",
        version="1.0.0",
        docs_url="/docs",
        openapi_url="/openapi.json",
    )
    app.state.service = TokenService(settings, store)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(TokenError)
    async def token_error_handler(request: Request, exc: TokenError) -> JSONResponse:
        if isinstance(exc, Unauthorized):
            status_code = 403
        elif isinstance(exc, InflationTooHigh):
            status_code = 409
        else:
            status_code = 400
        return JSONResponse(status_code=status_code, content={"detail": exc.message, "error": exc.kind})

    @app.get("/")
    def root() -> Dict[str, Any]:
        return {
            "ok": True,
            "service": "InflationToken-API",
            "env": settings.env_name,
            "health_url": "/healthz",
            "token_url": "/v1/token",
        }

    @app.get("/healthz")
    def health() -> Dict[str, Any]:
        service: TokenService = app.state.service
        with service.read() as token:
            owner_set = bool(token.owner)
        return {
            "ok": True,
            "env": settings.env_name,
            "storage": service.store.backend,
            "redis_url_set": bool(settings.redis_url),
            "owner_set": owner_set,
        }

    @app.get("/v1/ops/audit")
    def audit_log(limit: int = 20) -> Dict[str, Any]:
        service: TokenService = app.state.service
        return {"ok": True, "items": service.store.audit_entries(limit)}

    app.include_router(token_router)
    return app


_settings = load_settings()
configure_logging(_settings.log_level)
app = create_app(_settings)
