"""
Token state store

Persists InflationToken snapshots as JSON:
- Redis when a REDIS_URL is configured
- an in-process dict otherwise, or when Redis stops answering

Events are kept in their own append-only list, so a mutation only writes
the events it emitted instead of the whole history.

Also keeps an audit list (newest first) of the mutations that were applied.
"""

from __future__ import annotations
import json
import logging
import time
from typing import Any, Dict, List, Optional

import redis

logger = logging.getLogger(__name__)

K_STATE = "inflation_token:state"
K_AUDIT = "inflation_token:audit"
K_EVENTS = "inflation_token:events"
MAX_AUDIT = 200


def now_ts() -> int:
    return int(time.time())


class TokenStateStore:
    def __init__(self, redis_url: str = "") -> None:
        self.redis_url = redis_url.strip()
        self._mem_kv: Dict[str, str] = {}
        self._mem_lists: Dict[str, List[str]] = {}
        self.redis_client: Optional[redis.Redis] = None
        if self.redis_url:
            try:
                self.redis_client = redis.Redis.from_url(self.redis_url, decode_responses=True)
            except ValueError as e:
                logger.warning("Invalid REDIS_URL, using memory storage: %s", e)
                self.redis_client = None

    @property
    def backend(self) -> str:
        return "redis" if self.redis_client is not None else "memory"

    # ---------------------------
    # Raw key/value helpers (Redis with memory fallback)
    # ---------------------------
    def _get(self, key: str) -> Optional[str]:
        if self.redis_client is None:
            return self._mem_kv.get(key)
        try:
            return self.redis_client.get(key)
        except redis.RedisError as e:
            logger.warning("Redis get failed, reading memory: %s", e)
            return self._mem_kv.get(key)

    def _set(self, key: str, val: str) -> None:
        # memory always holds the latest value so a Redis outage can fall back to it
        self._mem_kv[key] = val
        if self.redis_client is None:
            return
        try:
            self.redis_client.set(key, val)
        except redis.RedisError as e:
            logger.warning("Redis set failed, kept in memory: %s", e)

    def _lpush(self, key: str, val: str, limit: int) -> None:
        items = self._mem_lists.setdefault(key, [])
        items.insert(0, val)
        del items[limit:]
        if self.redis_client is None:
            return
        try:
            self.redis_client.lpush(key, val)
            self.redis_client.ltrim(key, 0, limit - 1)
        except redis.RedisError as e:
            logger.warning("Redis lpush failed, kept in memory: %s", e)

    def _lrange(self, key: str, limit: int) -> List[str]:
        if self.redis_client is None:
            return self._mem_lists.get(key, [])[:limit]
        try:
            return self.redis_client.lrange(key, 0, limit - 1)
        except redis.RedisError as e:
            logger.warning("Redis lrange failed, reading memory: %s", e)
            return self._mem_lists.get(key, [])[:limit]

    def _rpush(self, key: str, vals: List[str]) -> None:
        if not vals:
            return
        self._mem_lists.setdefault(key, []).extend(vals)
        if self.redis_client is None:
            return
        try:
            self.redis_client.rpush(key, *vals)
        except redis.RedisError as e:
            logger.warning("Redis rpush failed, kept in memory: %s", e)

    def _lrange_all(self, key: str) -> List[str]:
        if self.redis_client is None:
            return list(self._mem_lists.get(key, []))
        try:
            return self.redis_client.lrange(key, 0, -1)
        except redis.RedisError as e:
            logger.warning("Redis lrange failed, reading memory: %s", e)
            return list(self._mem_lists.get(key, []))

    # ---------------------------
    # State, events + audit
    # ---------------------------
    def save_state(self, state: Dict[str, Any]) -> None:
        """Write the field and ledger state. Events go through append_events."""
        state = {k: v for k, v in state.items() if k != "events"}
        self._set(K_STATE, json.dumps(state))

    def append_events(self, events: List[Dict[str, Any]]) -> None:
        self._rpush(K_EVENTS, [json.dumps(ev) for ev in events])

    def load_events(self) -> List[Dict[str, Any]]:
        return [json.loads(line) for line in self._lrange_all(K_EVENTS)]

    def load_snapshot(self) -> Optional[Dict[str, Any]]:
        """Full snapshot: saved state plus the event list, oldest first."""
        raw = self._get(K_STATE)
        if not raw:
            return None
        snapshot = json.loads(raw)
        snapshot["events"] = self.load_events()
        return snapshot

    def audit(self, event: str, payload: Dict[str, Any]) -> None:
        entry = {"ts": now_ts(), "event": event, "payload": payload}
        self._lpush(K_AUDIT, json.dumps(entry), MAX_AUDIT)

    def audit_entries(self, limit: int = 20) -> List[Dict[str, Any]]:
        limit = max(1, min(limit, MAX_AUDIT))
        return [json.loads(line) for line in self._lrange(K_AUDIT, limit)]
