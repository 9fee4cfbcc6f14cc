"""Question history persistence (most-recent-first, unbounded)."""

import structlog

from exam_pilot.models.question import QuestionRecord
from exam_pilot.storage.kv import HISTORY_KEY, KeyValueStore

logger = structlog.get_logger()


class HistoryLog:
    """Ordered log of answered questions, newest first.

    Args:
        store: Backing key-value store.
    """

    def __init__(self, store: KeyValueStore):
        self.store = store

    def all(self) -> list[QuestionRecord]:
        """Return every record, most recent first. Empty if nothing is stored."""
        raw = self.store.get(HISTORY_KEY, []) or []
        return [QuestionRecord(**item) for item in raw]

    def append(self, record: QuestionRecord) -> None:
        records = [record, *self.all()]
        self.store.set(HISTORY_KEY, [r.model_dump(mode="json") for r in records])
        logger.debug("history_appended", question_id=record.id, size=len(records))

    def __len__(self) -> int:
        return len(self.store.get(HISTORY_KEY, []) or [])
