"""
Usage Counter - Count scrapes per month/URL/mode and persist them as JSON
"""

import json
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from loguru import logger

from ..errors import PersistenceError

UsageStats = Dict[str, Dict[str, Dict[str, int]]]


class UsageCounter:
    """
    In-memory month -> url -> mode -> count mapping, flushed to disk after
    every increment. No eviction: past months accumulate.
    """

    def __init__(self, stats_file: str, clock: Callable[[], datetime] = datetime.now):
        """
        Initialize usage counter.

        Args:
            stats_file: Path of the JSON stats file
            clock: Returns the current time (month keys are derived from it)
        """
        self.stats_file = Path(stats_file)
        self.clock = clock
        self.stats: UsageStats = {}

    def _ensure_data_dir(self) -> None:
        self.stats_file.parent.mkdir(parents=True, exist_ok=True)

    @staticmethod
    def _is_valid_stats(stats: Any) -> bool:
        """Check the three-level shape with integer counts."""
        if not isinstance(stats, dict):
            return False
        for urls in stats.values():
            if not isinstance(urls, dict):
                return False
            for modes in urls.values():
                if not isinstance(modes, dict):
                    return False
                for count in modes.values():
                    if not isinstance(count, int) or isinstance(count, bool):
                        return False
        return True

    def load(self) -> UsageStats:
        """
        Load persisted stats, starting empty if the file is missing or unreadable.

        Returns:
            Loaded stats dictionary
        """
        try:
            self._ensure_data_dir()
            with open(self.stats_file, 'r', encoding='utf-8') as f:
                stats = json.load(f)
            if not self._is_valid_stats(stats):
                raise ValueError("expected a month -> url -> mode -> count mapping")
            self.stats = stats
            logger.info(f"Loaded scrape stats from {self.stats_file}")
        except FileNotFoundError:
            logger.info("No existing stats file found. Starting with empty stats.")
            self.stats = {}
        except Exception as e:
            logger.warning(f"Could not read stats file {self.stats_file} ({e}). Starting with empty stats.")
            self.stats = {}
        return self.stats

    def save(self) -> None:
        """
        Rewrite the stats file with the full structure.

        Raises:
            PersistenceError: If the file cannot be written
        """
        try:
            self._ensure_data_dir()
            with open(self.stats_file, 'w', encoding='utf-8') as f:
                json.dump(self.stats, f, indent=2)
        except OSError as e:
            raise PersistenceError(f"Error saving stats to {self.stats_file}: {e}") from e

    def current_month(self) -> str:
        """Zero-padded YYYY-MM of the current time."""
        return self.clock().strftime('%Y-%m')

    def record(self, url: str, mode: str) -> int:
        """
        Count one scrape and persist.

        A failed write is logged and the in-memory count is kept; the
        scrape that triggered it still succeeds.

        Args:
            url: Scraped URL
            mode: Scrape mode value

        Returns:
            New count for (current month, url, mode)
        """
        month = self.current_month()
        url_stats = self.stats.setdefault(month, {}).setdefault(url, {})
        url_stats[mode] = url_stats.get(mode, 0) + 1

        try:
            self.save()
        except PersistenceError as e:
            logger.error(str(e))

        return url_stats[mode]

    def count(self, url: str, mode: str, month: Optional[str] = None) -> int:
        """Count for a url/mode pair (current month by default)."""
        month = month or self.current_month()
        return self.stats.get(month, {}).get(url, {}).get(mode, 0)

    def dump(self) -> UsageStats:
        """Full stats structure."""
        return self.stats
