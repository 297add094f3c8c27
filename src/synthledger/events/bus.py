from __future__ import annotations

import json
import logging

import redis

from .schema import EventEnvelope


DEFAULT_STREAM = "synthledger.events"
DEFAULT_DLQ = "synthledger.dlq"
DEFAULT_REDIS_URL = "redis://localhost:6379/0"

log = logging.getLogger("synthledger.events")


def to_json(env: EventEnvelope) -> str:
    return json.dumps({
        "schema_version": env.schema_version,
        "correlation_id": env.correlation_id,
        "sequence": env.sequence,
        "event": env.event.model_dump(),
    }, separators=(",", ":"))


class EventPublisher:
    """Logs committed ledger events as JSON lines, optionally mirrors them to Redis Streams."""

    def __init__(
        self,
        redis_enabled: bool = False,
        stream: str = DEFAULT_STREAM,
        dlq: str = DEFAULT_DLQ,
        redis_url: str = DEFAULT_REDIS_URL,
    ):
        self.redis_enabled = bool(redis_enabled)
        self.stream = stream
        self.dlq = dlq
        self.redis_url = redis_url

    @classmethod
    def from_config(cls, cfg) -> "EventPublisher":
        return cls(redis_enabled=cfg.redis_enabled, stream=cfg.stream, dlq=cfg.dlq, redis_url=cfg.redis_url)

    def _get_redis(self):
        return redis.Redis.from_url(self.redis_url, decode_responses=True)

    def publish(self, env: EventEnvelope) -> None:
        """The Redis leg is best effort: the transaction has already committed,
        so a stream outage must not surface as a ledger failure.
        """
        line = to_json(env)
        if self.redis_enabled:
            try:
                self._get_redis().xadd(self.stream, {"json": line})
            except redis.RedisError:
                try:
                    # best-effort DLQ
                    self._get_redis().xadd(self.dlq, {"json": line})
                except redis.RedisError:
                    log.warning("event dropped, redis unavailable: %s", env.event.event_type)
        log.info(line)
