"""Version-control integration."""

from .status import ChangeScanner, GitError

__all__ = ["ChangeScanner", "GitError"]
