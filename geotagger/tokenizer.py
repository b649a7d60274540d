"""
Greedy longest-first gazetteer matcher.

Strategy:
  - Each sentence gets its own IntervalTree of claimed character spans.
  - Windows are tried from ``max_window`` characters down to ``min_window``,
    so longer names (北京市) win over their prefixes (北京).
  - The first pass at ``max_window`` scans every offset; shorter passes use
    ``IntervalTree.next_available`` to jump over claimed spans.
  - Accepted spans are never revisited, so emitted matches never overlap.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Iterable, Optional

from geotagger.interval import Interval
from geotagger.interval_tree import IntervalTree
from geotagger.resolver import RecognitionContext, Resolver

logger = logging.getLogger(__name__)

DEFAULT_MAX_WINDOW = 15
DEFAULT_MIN_WINDOW = 2
# Wider than the legacy 。,; set: full-width and exclamation/question marks also
# end a sentence, which shifts sentence indices and text-output order.
DEFAULT_DELIMITERS = "。，；,;！？!?"


@dataclass(frozen=True)
class Match:
    span: Interval
    code: str
    text: str
    sentence: int = 0


def split_sentences(text: str, delimiters: str = DEFAULT_DELIMITERS) -> list[str]:
    """Split after each delimiter, keeping it at the end of its sentence."""
    if not delimiters:
        return [text] if text else []
    pattern = "(?<=[" + re.escape(delimiters) + "])"
    return [s for s in re.split(pattern, text) if s]


class GeoTagger:
    """Tags sentences with administrative codes via a shared Resolver."""

    def __init__(
        self,
        resolver: Resolver,
        max_window: int = DEFAULT_MAX_WINDOW,
        min_window: int = DEFAULT_MIN_WINDOW,
    ):
        if min_window < 2:
            raise ValueError("min_window must be at least 2")
        if max_window < min_window:
            raise ValueError("max_window must not be smaller than min_window")
        self.resolver = resolver
        self.max_window = max_window
        self.min_window = min_window

    def tag_sentence(
        self,
        sentence: str,
        origin_code: Optional[str],
        context: RecognitionContext,
        sentence_index: int = 0,
    ) -> list[Match]:
        claimed = IntervalTree()
        matches: list[Match] = []
        length = len(sentence)

        def accept(start: int, end: int, code: str) -> None:
            span = Interval(start, end)
            claimed.insert(span)
            matches.append(Match(span, code, sentence[start:end + 1], sentence_index))

        # Full scan at the longest window
        width = self.max_window
        j = 0
        while j + width - 1 < length:
            end = j + width - 1
            code = self.resolver.resolve(sentence[j:end + 1], origin_code, context)
            if code is not None:
                accept(j, end, code)
                j = end + 1
            else:
                j += 1

        # Shrinking windows, skipping claimed spans
        for width in range(self.max_window - 1, self.min_window - 1, -1):
            j = claimed.next_available(Interval(0, width - 1))
            while j + width - 1 < length:
                end = j + width - 1
                next_pos = claimed.next_available(Interval(j, end))
                if next_pos != j:
                    j = next_pos
                    continue
                code = self.resolver.resolve(sentence[j:end + 1], origin_code, context)
                if code is not None:
                    accept(j, end, code)
                    j = end + 1
                else:
                    j += 1

        return matches

    def tag_document(
        self,
        sentences: Iterable[str],
        origin_code: Optional[str] = None,
        context: Optional[RecognitionContext] = None,
    ) -> list[Match]:
        """
        Tag every sentence of one document. Provinces and cities confirmed in
        earlier sentences help disambiguate later ones.
        """
        if context is None:
            context = RecognitionContext()
        matches: list[Match] = []
        for i, sentence in enumerate(sentences):
            matches.extend(self.tag_sentence(sentence, origin_code, context, sentence_index=i))
        logger.debug("Tagged document (origin=%s): %d matches", origin_code, len(matches))
        return matches
