"""
Idempotency Ledger

Maps a client-supplied key to the exact response first produced for it.

Write-once semantics come from the primary key on IdempotencyRecord.key:
two writers racing on a never-seen key both attempt the insert, the
database accepts one, and the loser re-reads and replays the winner's
response. Nothing here holds an in-process lock.
"""

from __future__ import annotations

import hashlib
import json
from dataclasses import dataclass, field

import structlog
from django.db import IntegrityError, transaction  # type: ignore

from shared.domain.errors import InvalidRequest

from .models import IdempotencyRecord

logger = structlog.get_logger(__name__)


class IdempotencyKeyReused(InvalidRequest):
    """The key was already spent on another operation or another payload."""

    code = "idempotency_key_reused"
    status_code = 422
    recordable = False


class KeyAlreadyRecorded(Exception):
    """Raised by `insert` when another request recorded the key first."""


@dataclass(frozen=True)
class StoredResponse:
    status_code: int
    body: dict = field(default_factory=dict)
    replayed: bool = False


def fingerprint(payload: dict) -> str:
    """Stable SHA-256 of a JSON-compatible payload."""

    canonical = json.dumps(payload, sort_keys=True, separators=(",", ":"), default=str)
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()


class IdempotencyLedger:
    """Ledger bound to one logical operation (`scope`)."""

    def __init__(self, scope: str):
        self.scope = scope

    def lookup(self, key: str, request_fingerprint: str) -> StoredResponse | None:
        record = IdempotencyRecord.objects.filter(pk=key).first()
        if record is None:
            return None

        if record.scope != self.scope:
            raise IdempotencyKeyReused("Idempotency-Key was already used for a different operation")
        if record.request_fingerprint != request_fingerprint:
            raise IdempotencyKeyReused("Idempotency-Key was already used with a different request payload")

        logger.info("idempotency.replay", key=key, scope=self.scope, status_code=record.status_code)
        return StoredResponse(record.status_code, record.response_body, replayed=True)

    def insert(self, key: str, request_fingerprint: str, status_code: int, body: dict) -> StoredResponse:
        """
        Insert inside the caller's transaction.

        Runs in a savepoint so a duplicate key does not poison the outer
        transaction; the caller decides whether to roll back.
        """
        try:
            with transaction.atomic():
                IdempotencyRecord.objects.create(
                    key=key,
                    scope=self.scope,
                    request_fingerprint=request_fingerprint,
                    status_code=status_code,
                    response_body=body,
                )
        except IntegrityError as exc:
            raise KeyAlreadyRecorded(key) from exc
        return StoredResponse(status_code, body)

    def record(self, key: str, request_fingerprint: str, status_code: int, body: dict) -> StoredResponse:
        """First writer wins: a losing writer returns the stored response."""

        try:
            return self.insert(key, request_fingerprint, status_code, body)
        except KeyAlreadyRecorded:
            winner = self.lookup(key, request_fingerprint)
            if winner is None:
                raise
            logger.info("idempotency.lost_race", key=key, scope=self.scope, status_code=winner.status_code)
            return winner
