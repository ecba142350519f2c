"""
Audit trail for mediated AI interactions.

Keeps a bounded, oldest-first list of AuditEntry records in a key-value
store. Entries hold a one-way hash of the message that was sent and the
first characters of the model output. Raw user text is never stored.
"""

import hashlib
import logging
import threading
from datetime import datetime, timezone

from pydantic import ValidationError

from caretaker.core.storage import InMemoryStore, KeyValueStore
from caretaker.models.safety import AuditEntry, AuditStats, Severity

logger = logging.getLogger(__name__)

AUDIT_LOG_KEY = "caretaker_ai_audit_log"
MAX_LOG_ENTRIES = 100
PREVIEW_CHARS = 100


def hash_message(text: str) -> str:
    """SHA-256 hex digest of the text, for correlating entries while debugging."""
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


def build_entry(
    sent_message: str,
    response_text: str,
    flags: list[str],
    severity: Severity,
    was_substituted: bool,
) -> AuditEntry:
    """Create an entry stamped with the current UTC time."""
    return AuditEntry(
        timestamp=datetime.now(timezone.utc).isoformat(),
        user_message_hash=hash_message(sent_message),
        response_preview=response_text[:PREVIEW_CHARS],
        safety_flags=list(flags),
        severity=severity,
        was_substituted=was_substituted,
    )


class AuditLog:
    """Bounded FIFO audit trail over a KeyValueStore."""

    def __init__(
        self,
        store: KeyValueStore | None = None,
        capacity: int = MAX_LOG_ENTRIES,
        key: str = AUDIT_LOG_KEY,
    ) -> None:
        self._store = store if store is not None else InMemoryStore()
        self._capacity = capacity
        self._key = key
        self._lock = threading.Lock()

    def _load_raw(self) -> list[dict]:
        raw = self._store.get(self._key)
        return raw if isinstance(raw, list) else []

    def record(self, entry: AuditEntry) -> None:
        """
        Append an entry, evicting the oldest beyond capacity.

        Storage failures are logged and swallowed; recording never fails
        the caller's request.
        """
        if entry.severity != "clean":
            logger.warning(
                "AI audit: severity=%s flags=%s substituted=%s",
                entry.severity,
                entry.safety_flags,
                entry.was_substituted,
            )

        try:
            with self._lock:
                entries = self._load_raw()
                entries.append(entry.model_dump())
                self._store.set(self._key, entries[-self._capacity:])
        except Exception:
            logger.exception("Failed to record AI interaction")

    def list(self) -> list[AuditEntry]:
        """All retained entries, oldest first."""
        try:
            with self._lock:
                raw_entries = self._load_raw()
        except Exception:
            logger.exception("Failed to read AI audit log")
            return []

        entries = []
        for raw in raw_entries:
            try:
                entries.append(AuditEntry.model_validate(raw))
            except ValidationError:
                logger.warning("Skipping malformed audit entry")
        return entries

    def clear(self) -> None:
        try:
            with self._lock:
                self._store.remove(self._key)
        except Exception:
            logger.exception("Failed to clear AI audit log")

    def stats(self) -> AuditStats:
        entries = self.list()
        return AuditStats(
            total=len(entries),
            blocked=sum(1 for e in entries if e.severity == "blocked"),
            warnings=sum(1 for e in entries if e.severity == "warning"),
            clean=sum(1 for e in entries if e.severity == "clean"),
        )
