"""Pipeline orchestration for the scan, import and remove-comments flows."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from .comments.formatter import FileAccessError, insert_comment, resolve_target
from .comments.stripper import strip_comments
from .comments.styles import extension_of, style_for
from .config import KommentsConfig
from .git.status import ChangeScanner
from .llm.runner import LLMRunner
from .logging import get_logger, log_success
from .models import RemovalRecord, Suggestion
from .repo_scanner import SourceTree, WalkFn, collect_codebase_info, excluding
from .review import APPLY, EDIT, EXIT, SKIP, AutoApproveReviewer, ConsoleReviewer, Reviewer
from .stores.history import GenerationList, HistoryStore, utc_timestamp
from .synthesizer import CommentSynthesizer, TextGenerator


@dataclass
class ApplyOutcome:
    """Counts from one pass over a list of suggestions."""

    applied: int = 0
    skipped: int = 0
    failed: int = 0
    exited: bool = False


@dataclass
class ScanOutcome:
    """Result of a scan run."""

    changed_files: List[str] = field(default_factory=list)
    suggestions: List[Suggestion] = field(default_factory=list)
    history_path: Optional[Path] = None
    applied: Optional[ApplyOutcome] = None


def order_for_apply(suggestions: Sequence[Suggestion]) -> List[Suggestion]:
    """Group suggestions by file (first-seen order), bottom-most line first.

    Inserting from the bottom up keeps every pending line number valid, since
    an insertion only shifts the lines below it.
    """
    file_order: Dict[str, int] = {}
    for suggestion in suggestions:
        file_order.setdefault(suggestion.file, len(file_order))
    return sorted(suggestions, key=lambda item: (file_order[item.file], -item.line))


def build_runner(config: KommentsConfig) -> LLMRunner:
    llm = config.llm
    return LLMRunner(
        llm.model,
        provider=llm.provider,
        api_key=config.api_key,
        base_url=llm.base_url,
        temperature=llm.temperature,
        max_tokens=llm.max_tokens,
        request_timeout=llm.request_timeout,
    )


class Orchestrator:
    """Coordinates change scanning, synthesis, application and removal."""

    def __init__(
        self,
        config: KommentsConfig,
        *,
        runner: TextGenerator | None = None,
        change_scanner: ChangeScanner | None = None,
        reviewer: Reviewer | None = None,
        history: HistoryStore | None = None,
        walk: WalkFn = os.walk,
    ) -> None:
        self.config = config
        self.root = config.root
        self._runner = runner
        self.change_scanner = change_scanner or ChangeScanner()
        self.reviewer = reviewer or ConsoleReviewer()
        self.history = history or HistoryStore(config.history_file)
        self.walk = walk
        self.logger = get_logger("orchestrator")

    @property
    def runner(self) -> TextGenerator:
        if self._runner is None:
            self._runner = build_runner(self.config)
        return self._runner

    # ------------------------------------------------------------------
    # Scan

    def run_scan(
        self,
        *,
        interactive: bool = False,
        temperature: float | None = None,
    ) -> ScanOutcome:
        """Synthesize suggestions for changed files, save them, optionally review them."""
        self.logger.info("Scanning Git changes in %s", self.root)
        changed = self.change_scanner.changed_files(self.root)
        if not changed:
            self.logger.warning("No modified code files found.")
            return ScanOutcome()

        synthesizer = CommentSynthesizer(
            self.runner,
            temperature=temperature if temperature is not None else self.config.llm.temperature,
            max_tokens=self.config.llm.max_tokens,
        )
        suggestions = synthesizer.analyze(changed, root=self.root)

        codebase_info = collect_codebase_info(self.root, walk=self.walk)
        self.history.append(suggestions, codebase_info)
        self.logger.info("Suggestions saved to %s", self.history.path.name)

        outcome = ScanOutcome(
            changed_files=list(changed),
            suggestions=suggestions,
            history_path=self.history.path,
        )
        if interactive and suggestions:
            outcome.applied = self.apply_suggestions(suggestions, interactive=True)
        elif not interactive:
            self.logger.info("Run with --interactive to review and apply suggestions")
        return outcome

    # ------------------------------------------------------------------
    # Apply / import

    def apply_suggestions(
        self,
        suggestions: Sequence[Suggestion],
        *,
        interactive: bool,
    ) -> ApplyOutcome:
        """Write suggestions into their files, asking per suggestion when ``interactive``."""
        reviewer = self.reviewer if interactive else AutoApproveReviewer()
        outcome = ApplyOutcome()
        if interactive:
            self.logger.info("Interactive mode: review and apply suggestions")
            self.logger.warning("This will modify your source files by adding comments.")

        for suggestion in order_for_apply(suggestions):
            action = reviewer.choose(suggestion)
            if action == EXIT:
                self.logger.warning("Exiting interactive mode.")
                outcome.exited = True
                break
            if action == SKIP:
                outcome.skipped += 1
                continue

            comment = suggestion.suggested_comment
            if action == EDIT:
                comment = reviewer.edit(comment)
            elif action != APPLY:  # pragma: no cover - reviewer contract
                outcome.skipped += 1
                continue

            try:
                insert_comment(suggestion.file, suggestion.line, comment, root=self.root)
            except FileAccessError as exc:
                self.logger.error(
                    "Error applying comment to %s:%d: %s", suggestion.file, suggestion.line, exc
                )
                outcome.failed += 1
                continue
            outcome.applied += 1
            log_success(self.logger, "Applied comment to %s:%d", suggestion.file, suggestion.line)

        log_success(
            self.logger,
            "Applied %d, skipped %d, failed %d suggestion(s).",
            outcome.applied,
            outcome.skipped,
            outcome.failed,
        )
        return outcome

    def run_import(
        self,
        history_path: Path | None = None,
        *,
        interactive: bool = True,
    ) -> ApplyOutcome:
        """Apply the latest generation's suggestions from a history document."""
        store = HistoryStore(history_path) if history_path is not None else self.history
        if not store.path.exists():
            raise FileNotFoundError(f"File {store.path} does not exist.")

        document = store.read_document()
        if isinstance(document, GenerationList):
            if not document.generations:
                self.logger.warning("No suggestion generations found in %s", store.path.name)
                return ApplyOutcome()
            latest = document.generations[-1]
            suggestions = latest.suggestions
            if latest.codebase_info is not None:
                self.logger.info("Using codebase information from %s for context", store.path.name)
        else:
            suggestions = document.suggestions

        log_success(self.logger, "Found %d comment suggestions to import.", len(suggestions))
        if not suggestions:
            return ApplyOutcome()
        if not interactive:
            self.logger.info("Applying all suggestions without interaction...")
        return self.apply_suggestions(suggestions, interactive=interactive)

    # ------------------------------------------------------------------
    # Remove

    def run_remove(
        self,
        files: Sequence[str] | None = None,
        *,
        confirm: bool = True,
    ) -> Optional[RemovalRecord]:
        """Strip comments from ``files`` (or every source file under the root).

        Returns ``None`` when there is nothing to process or the user declines.
        """
        targets = list(files) if files else self._discover_sources()
        if not targets:
            self.logger.warning("No source files found for comment removal.")
            return None

        if confirm and not self.reviewer.confirm(
            f"This will remove comments from {len(targets)} file(s). Continue?"
        ):
            self.logger.warning("Comment removal cancelled.")
            return None

        record = RemovalRecord(timestamp=utc_timestamp())
        for target in targets:
            removed = self._strip_file(target)
            if removed is not None:
                record.add(target, removed)

        self.history.record_removal(record)
        log_success(
            self.logger,
            "Removed %d comment(s) from %d file(s).",
            record.comments_removed,
            len(record.details),
        )
        return record

    def _discover_sources(self) -> List[str]:
        tree = SourceTree(
            self.root,
            exclude=excluding(self.config.remove.exclude_dirs),
            walk=self.walk,
        )
        return [path.relative_to(self.root).as_posix() for path in tree]

    def _strip_file(self, file: str) -> Optional[int]:
        path = resolve_target(file, self.root)
        try:
            content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            self.logger.error("Error processing %s: %s", file, exc)
            return None

        extension = extension_of(path)
        result = strip_comments(content, extension, style_for(extension))
        if result.removed_count > 0:
            try:
                path.write_text(result.content, encoding="utf-8")
            except OSError as exc:
                self.logger.error("Error writing %s: %s", file, exc)
                return None
            self.logger.info("Removed %d comment(s) from %s", result.removed_count, file)
        return result.removed_count


__all__ = [
    "ApplyOutcome",
    "Orchestrator",
    "ScanOutcome",
    "build_runner",
    "order_for_apply",
]
