"""Persistent history of suggestion batches and comment removal runs."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
import json
from pathlib import Path
from typing import Any, List, Optional, Sequence, Union

from ..logging import get_logger
from ..models import CodebaseInfo, Generation, RemovalRecord, Suggestion

DEFAULT_HISTORY_FILENAME = "komments.json"
LEGACY_GENERATION_ID = "legacy"


class HistoryFormatError(ValueError):
    """Raised when a history payload is neither a generation list nor a legacy list."""


@dataclass
class GenerationList:
    """The current on-disk shape: an ordered array of generations."""

    generations: List[Generation] = field(default_factory=list)


@dataclass
class LegacyFlatList:
    """The older on-disk shape: a bare array of suggestions."""

    suggestions: List[Suggestion] = field(default_factory=list)


HistoryDocument = Union[GenerationList, LegacyFlatList]


def utc_timestamp(now: datetime | None = None) -> str:
    moment = now or datetime.now(UTC)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def generation_id(now: datetime) -> str:
    return f"gen-{int(now.timestamp() * 1000)}"


def decode_document(payload: Any) -> HistoryDocument:
    """Classify a parsed JSON payload as a generation list or a legacy suggestion list."""
    if not isinstance(payload, list):
        raise HistoryFormatError("History document must be a JSON array")
    if not payload:
        return GenerationList()
    if not all(isinstance(item, dict) for item in payload):
        raise HistoryFormatError("History entries must be JSON objects")
    if "suggestions" not in payload[0]:
        return LegacyFlatList([Suggestion.from_dict(item) for item in payload])
    return GenerationList([Generation.from_dict(item) for item in payload])


def upgrade_document(document: HistoryDocument, *, now: datetime | None = None) -> List[Generation]:
    """Return the generation sequence for ``document``, wrapping legacy lists."""
    if isinstance(document, GenerationList):
        return list(document.generations)
    return [
        Generation(
            id=LEGACY_GENERATION_ID,
            timestamp=utc_timestamp(now),
            suggestions=list(document.suggestions),
        )
    ]


def append_generation(
    generations: Sequence[Generation],
    suggestions: Sequence[Suggestion],
    codebase_info: CodebaseInfo | None = None,
    removal: RemovalRecord | None = None,
    *,
    now: datetime | None = None,
) -> List[Generation]:
    """Return ``generations`` followed by a new generation holding ``suggestions``."""
    moment = now or datetime.now(UTC)
    generation = Generation(
        id=generation_id(moment),
        timestamp=utc_timestamp(moment),
        suggestions=list(suggestions),
        codebase_info=codebase_info,
        comment_removal=removal,
    )
    return [*generations, generation]


def attach_removal(
    generations: Sequence[Generation],
    removal: RemovalRecord,
    *,
    now: datetime | None = None,
) -> List[Generation]:
    """Record ``removal`` on the latest generation, or in a new one when there is none."""
    if not generations:
        return append_generation([], [], removal=removal, now=now)
    updated = list(generations)
    updated[-1] = replace(updated[-1], comment_removal=removal)
    return updated


class HistoryStore:
    """Reads and rewrites the JSON history document."""

    def __init__(self, path: Path) -> None:
        self.path = path
        self.logger = get_logger("history")

    def read_document(self) -> HistoryDocument:
        """Return the decoded document; missing or corrupt files decode as empty."""
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return GenerationList()
        except OSError as exc:
            self.logger.warning("Error reading %s (%s); starting a new history", self.path.name, exc)
            return GenerationList()

        try:
            return decode_document(json.loads(raw))
        except (json.JSONDecodeError, HistoryFormatError, TypeError, ValueError) as exc:
            self.logger.warning(
                "Error reading existing %s (%s); creating new file", self.path.name, exc
            )
            return GenerationList()

    def load(self) -> List[Generation]:
        return upgrade_document(self.read_document())

    def save(self, generations: Sequence[Generation]) -> None:
        payload = [generation.to_dict() for generation in generations]
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(payload, indent=2) + "\n", encoding="utf-8")

    def append(
        self,
        suggestions: Sequence[Suggestion],
        codebase_info: CodebaseInfo | None = None,
        removal: RemovalRecord | None = None,
    ) -> List[Generation]:
        generations = append_generation(self.load(), suggestions, codebase_info, removal)
        self.save(generations)
        return generations

    def record_removal(self, removal: RemovalRecord) -> List[Generation]:
        generations = attach_removal(self.load(), removal)
        self.save(generations)
        return generations

    def latest(self) -> Optional[Generation]:
        generations = self.load()
        return generations[-1] if generations else None


__all__ = [
    "DEFAULT_HISTORY_FILENAME",
    "GenerationList",
    "HistoryDocument",
    "HistoryFormatError",
    "HistoryStore",
    "LEGACY_GENERATION_ID",
    "LegacyFlatList",
    "append_generation",
    "attach_removal",
    "decode_document",
    "upgrade_document",
    "utc_timestamp",
]
