"""
News ingestion module.
Reads the newspaper → origin-code table and the article CSV, strips markup,
and converts traditional-script articles to simplified Chinese.
"""

from __future__ import annotations

import csv
import logging
import re
from pathlib import Path
from typing import Iterator, Optional

from bs4 import BeautifulSoup
from opencc import OpenCC

from geotagger.models import NewsRecord

logger = logging.getLogger(__name__)

_WHITESPACE_RE = re.compile(r"\s+")


# ── Newspaper origins ─────────────────────────────────────────────────

def load_newspaper_list(path: str | Path) -> dict[str, str]:
    """
    Parse whitespace-separated ``name code`` pairs. Pairs may span lines,
    but every name must be followed by a code.
    """
    path = Path(path)
    tokens = path.read_text(encoding="utf-8").split()
    if len(tokens) % 2:
        raise ValueError(f"{path}: newspaper '{tokens[-1]}' has no origin code")

    newspapers = dict(zip(tokens[0::2], tokens[1::2]))
    logger.info("Loaded %d newspapers from %s", len(newspapers), path)
    return newspapers


def origin_for(newspapers: dict[str, str], newspaper: Optional[str]) -> Optional[str]:
    """Origin code for a newspaper, or None (origin-priority disabled)."""
    if not newspaper:
        return None
    origin = newspapers.get(newspaper)
    if origin is None:
        logger.warning("Unknown newspaper '%s', tagging without origin", newspaper)
    return origin


# ── Article CSV ───────────────────────────────────────────────────────

class NewsCsvReader:
    """
    Iterates NewsRecords from an article CSV: column 0 is the id, column 1
    the newspaper, the last column the article body. Rows with fewer than
    three columns are skipped with a warning and counted in ``skipped``.
    """

    def __init__(self, path: str | Path, encoding: str = "utf-8"):
        self.path = Path(path)
        self.encoding = encoding
        self.skipped = 0

    def __iter__(self) -> Iterator[NewsRecord]:
        with self.path.open("r", encoding=self.encoding, newline="") as f:
            for row_no, row in enumerate(csv.reader(f), 1):
                if len(row) < 3:
                    logger.warning("%s:%d: expected at least 3 columns, got %d; skipping",
                                   self.path, row_no, len(row))
                    self.skipped += 1
                    continue
                yield NewsRecord(record_id=row[0], newspaper=row[1], text=row[-1])


def clean_text(raw: str) -> str:
    """Drop HTML markup and every whitespace character."""
    text = BeautifulSoup(raw, "html.parser").get_text()
    return _WHITESPACE_RE.sub("", text)


class TextNormalizer:
    """Converts traditional-script articles from the configured origins."""

    def __init__(self, traditional_origins: tuple[str, ...] = ("81", "82"), profile: str = "t2s"):
        self.traditional_origins = frozenset(traditional_origins)
        self._converter = OpenCC(profile)

    def needs_conversion(self, origin_code: Optional[str]) -> bool:
        return origin_code in self.traditional_origins

    def normalize(self, text: str, origin_code: Optional[str]) -> str:
        if self.needs_conversion(origin_code):
            return self._converter.convert(text)
        return text
