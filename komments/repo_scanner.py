"""Project tree traversal and codebase summaries."""

from __future__ import annotations

import os
from collections import Counter
from pathlib import Path
from typing import Callable, Iterable, Iterator, Sequence, Tuple

from .comments.styles import is_known_extension, language_for
from .models import CodebaseInfo

WalkFn = Callable[[str], Iterable[Tuple[str, Sequence[str], Sequence[str]]]]

DEPENDENCY_DIRS = frozenset(
    {
        "node_modules",
        "bower_components",
        "vendor",
        "venv",
        "env",
        "__pycache__",
        "site-packages",
        "Pods",
        "target",
    }
)


def is_excluded_dir(name: str, extra: Iterable[str] = ()) -> bool:
    """Hidden directories, dependency-manager directories and ``extra`` names are skipped."""
    return name.startswith(".") or name in DEPENDENCY_DIRS or name in set(extra)


def excluding(extra: Iterable[str]) -> Callable[[str], bool]:
    names = frozenset(extra)
    return lambda name: is_excluded_dir(name, names)


def _has_extension(path: Path) -> bool:
    return bool(path.suffix)


class SourceTree:
    """Restartable iteration over files below ``root``.

    ``exclude`` decides on directory names and ``accept`` on file paths. The
    ``walk`` callable has the shape of :func:`os.walk`, which lets tests feed an
    in-memory tree.
    """

    def __init__(
        self,
        root: Path,
        *,
        exclude: Callable[[str], bool] = is_excluded_dir,
        accept: Callable[[Path], bool] = is_known_extension,
        walk: WalkFn = os.walk,
    ) -> None:
        self.root = Path(root)
        self.exclude = exclude
        self.accept = accept
        self.walk = walk

    def __iter__(self) -> Iterator[Path]:
        for dirpath, dirnames, filenames in self.walk(str(self.root)):
            if isinstance(dirnames, list):
                # os.walk honours in-place pruning.
                dirnames[:] = sorted(name for name in dirnames if not self.exclude(name))
            current = Path(dirpath)
            if self._inside_excluded(current):
                continue
            for filename in sorted(filenames):
                path = current / filename
                if self.accept(path):
                    yield path

    def _inside_excluded(self, directory: Path) -> bool:
        try:
            relative = directory.relative_to(self.root)
        except ValueError:
            return False
        return any(self.exclude(part) for part in relative.parts)


def collect_codebase_info(root: Path, *, walk: WalkFn = os.walk) -> CodebaseInfo:
    """Count files per extension and list detected languages below ``root``."""
    counts: Counter[str] = Counter()
    languages: list[str] = []
    for path in SourceTree(root, accept=_has_extension, walk=walk):
        extension = path.suffix.lower()
        counts[extension] += 1
        language = language_for(extension, default=None)
        if language and language not in languages:
            languages.append(language)
    return CodebaseInfo(
        file_types=dict(counts),
        total_files=sum(counts.values()),
        languages=languages,
    )


__all__ = [
    "DEPENDENCY_DIRS",
    "SourceTree",
    "collect_codebase_info",
    "excluding",
    "is_excluded_dir",
]
