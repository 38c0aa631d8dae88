"""Core data models shared across komments components."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class CodeUnit:
    """A heuristically bounded span of source believed to be one function or class."""

    text: str
    start_line: int

    @property
    def first_line(self) -> str:
        return self.text.split("\n", 1)[0]

    def preview(self) -> str:
        """Return the first line, suffixed with ``...`` when the unit spans more lines."""
        if "\n" in self.text:
            return f"{self.first_line}..."
        return self.first_line


@dataclass(frozen=True)
class CommentStyle:
    """Comment syntax for a language: a line prefix and an optional block suffix."""

    line_prefix: str
    block_suffix: str = ""

    @property
    def is_block(self) -> bool:
        return bool(self.block_suffix)


@dataclass
class Suggestion:
    """A synthesized comment waiting to be inserted before ``line`` of ``file``."""

    file: str
    line: int
    code_snippet_preview: str
    suggested_comment: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "file": self.file,
            "line": self.line,
            "codeSnippet": self.code_snippet_preview,
            "suggestedComment": self.suggested_comment,
        }

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "Suggestion":
        preview = payload.get("codeSnippet", payload.get("codeSnippetPreview", ""))
        return cls(
            file=str(payload.get("file", "")),
            line=int(payload.get("line", 1)),
            code_snippet_preview=str(preview or ""),
            suggested_comment=str(payload.get("suggestedComment", "")),
        )


@dataclass
class CodebaseInfo:
    """Extension counts and languages detected across the project tree."""

    file_types: Dict[str, int] = field(default_factory=dict)
    total_files: int = 0
    languages: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "fileTypes": dict(self.file_types),
            "totalFiles": self.total_files,
            "languages": list(self.languages),
        }

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "CodebaseInfo":
        file_types = payload.get("fileTypes")
        languages = payload.get("languages")
        return cls(
            file_types={str(k): int(v) for k, v in file_types.items()}
            if isinstance(file_types, dict)
            else {},
            total_files=int(payload.get("totalFiles", 0) or 0),
            languages=[str(item) for item in languages] if isinstance(languages, list) else [],
        )


@dataclass
class RemovalDetail:
    """Per-file outcome of a comment removal run."""

    file: str
    comments_removed: int

    def to_dict(self) -> Dict[str, Any]:
        return {"file": self.file, "commentsRemoved": self.comments_removed}


@dataclass
class RemovalRecord:
    """Summary of one comment removal run."""

    timestamp: str
    files_processed: List[str] = field(default_factory=list)
    comments_removed: int = 0
    details: List[RemovalDetail] = field(default_factory=list)

    def add(self, file: str, removed: int) -> None:
        """Count ``file`` as processed; files that lost comments also get a detail entry."""
        if file not in self.files_processed:
            self.files_processed.append(file)
        if removed > 0:
            self.comments_removed += removed
            self.details.append(RemovalDetail(file=file, comments_removed=removed))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "timestamp": self.timestamp,
            "filesProcessed": list(self.files_processed),
            "commentsRemoved": self.comments_removed,
            "details": [detail.to_dict() for detail in self.details],
        }

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "RemovalRecord":
        details: List[RemovalDetail] = []
        for raw in payload.get("details") or []:
            if isinstance(raw, dict):
                details.append(
                    RemovalDetail(
                        file=str(raw.get("file", "")),
                        comments_removed=int(raw.get("commentsRemoved", 0) or 0),
                    )
                )
        files = payload.get("filesProcessed")
        return cls(
            timestamp=str(payload.get("timestamp", "")),
            files_processed=[str(item) for item in files] if isinstance(files, list) else [],
            comments_removed=int(payload.get("commentsRemoved", 0) or 0),
            details=details,
        )


@dataclass
class Generation:
    """One persisted batch of suggestions and/or a removal record."""

    id: str
    timestamp: str
    suggestions: List[Suggestion] = field(default_factory=list)
    codebase_info: Optional[CodebaseInfo] = None
    comment_removal: Optional[RemovalRecord] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id": self.id,
            "timestamp": self.timestamp,
            "suggestions": [suggestion.to_dict() for suggestion in self.suggestions],
        }
        if self.codebase_info is not None:
            data["codebaseInfo"] = self.codebase_info.to_dict()
        if self.comment_removal is not None:
            data["commentRemoval"] = self.comment_removal.to_dict()
        return data

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "Generation":
        info = payload.get("codebaseInfo")
        removal = payload.get("commentRemoval")
        return cls(
            id=str(payload.get("id", "")),
            timestamp=str(payload.get("timestamp", "")),
            suggestions=[
                Suggestion.from_dict(item)
                for item in payload.get("suggestions") or []
                if isinstance(item, dict)
            ],
            codebase_info=CodebaseInfo.from_dict(info) if isinstance(info, dict) else None,
            comment_removal=RemovalRecord.from_dict(removal) if isinstance(removal, dict) else None,
        )
