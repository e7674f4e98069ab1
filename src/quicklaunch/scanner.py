"""Shortcut discovery.

Walks every configured shortcut directory and turns each regular file
into a Candidate named after its file stem. Unreadable or missing
directories are logged and skipped; a scan never aborts.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from quicklaunch.config import SearchConfig
from quicklaunch.models import Candidate

logger = logging.getLogger(__name__)


class ShortcutScanner:
    """Discovers launchable shortcuts.

    Usage:
        scanner = ShortcutScanner(config.search)
        candidates = scanner.scan()
    """

    def __init__(self, config: SearchConfig) -> None:
        self.config = config
        self._ignored = [p.resolve() for p in config.expanded_ignore_paths()]

    def _is_ignored(self, path: Path) -> bool:
        resolved = path.resolve()
        return any(resolved == ign or ign in resolved.parents for ign in self._ignored)

    def discover_files(self, root: Path) -> list[Path]:
        """Return shortcut files under *root* in deterministic walk order."""
        if not root.is_dir():
            logger.warning("shortcut path %s is not a directory; skipping", root)
            return []
        if self._is_ignored(root):
            return []

        def _on_error(err: OSError) -> None:
            logger.warning("couldn't read %s: %s", err.filename, err.strerror)

        found: list[Path] = []
        for dirpath, dirnames, filenames in os.walk(root, onerror=_on_error):
            current = Path(dirpath)
            # Prune in place so os.walk skips ignored and hidden subtrees
            dirnames[:] = sorted(
                d
                for d in dirnames
                if not d.startswith(".") and not self._is_ignored(current / d)
            )
            for name in sorted(filenames):
                if name.startswith("."):
                    continue
                path = current / name
                if path.is_file():
                    found.append(path)
        return found

    def scan(self) -> list[Candidate]:
        """Scan every shortcut path, in configured order."""
        candidates: list[Candidate] = []
        for root in self.config.expanded_shortcut_paths():
            files = self.discover_files(root)
            logger.debug("scanned %s files=%d", root, len(files))
            candidates.extend(Candidate.from_path(path) for path in files)
        logger.info("shortcut scan complete candidates=%d", len(candidates))
        return candidates
