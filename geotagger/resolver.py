"""
Gazetteer resolution with document-local disambiguation.

A candidate term resolves either verbatim (direct resolution) or, failing
that, by appending administrative suffixes (北京 → 北京市). Ambiguous names
are settled by the publisher's origin code first and by the provinces and
cities already confirmed earlier in the same document second.

The heuristics here are empirically tuned against newspaper text; change
them only with evaluation data in hand.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from geotagger.gazetteer import CITY, PROVINCE, Gazetteer, GeoUnit

logger = logging.getLogger(__name__)

# Order matters: see Resolver._resolve_with_suffixes
SUFFIXES = (
    "省", "自治区", "市",
    "区", "县",
    "壮族自治区", "回族自治区", "维吾尔自治区",
    "自治县", "自治州",
)
# Index of the last suffix in the provincial/municipal tier ("市")
MUNICIPAL_TIER = 2
PROVINCE_CODE_LENGTH = 2
CITY_CODE_LENGTH = 4


@dataclass
class RecognitionContext:
    """
    Province and city codes confirmed so far in one document.
    Create a fresh one per document; never share across documents.
    """
    provinces: set[str] = field(default_factory=set)
    cities: set[str] = field(default_factory=set)

    def record(self, unit: GeoUnit) -> None:
        if unit.level == PROVINCE:
            self.provinces.add(unit.code)
        else:
            self.cities.add(unit.code)

    def reset(self) -> None:
        self.provinces.clear()
        self.cities.clear()


class Resolver:
    """Maps a candidate term to a single administrative code, or None."""

    def __init__(self, gazetteer: Gazetteer):
        self.gazetteer = gazetteer

    def resolve(
        self,
        term: str,
        origin_code: Optional[str],
        context: RecognitionContext,
    ) -> Optional[str]:
        # An empty origin would prefix-match every code
        origin_code = origin_code or None
        if term in self.gazetteer:
            return self._resolve_direct(term, origin_code, context)
        return self._resolve_with_suffixes(term, origin_code, context)

    def _resolve_direct(
        self,
        name: str,
        origin_code: Optional[str],
        context: RecognitionContext,
    ) -> Optional[str]:
        candidates = self.gazetteer.lookup(name)
        if not candidates:
            return None

        if len(candidates) == 1:
            unit = candidates[0]
            context.record(unit)
            return unit.code

        for unit in candidates:
            if unit.is_descendant_of(origin_code):
                logger.debug("'%s' -> %s (origin %s)", name, unit.code, origin_code)
                return unit.code

        for unit in candidates:
            confirmed = context.provinces if unit.level == CITY else context.cities
            if any(unit.is_descendant_of(code) for code in confirmed):
                logger.debug("'%s' -> %s (document context)", name, unit.code)
                return unit.code

        logger.debug("'%s' is ambiguous (%d candidates), unresolved", name, len(candidates))
        return None

    def _resolve_with_suffixes(
        self,
        term: str,
        origin_code: Optional[str],
        context: RecognitionContext,
    ) -> Optional[str]:
        """
        Try ``term + suffix`` for every suffix, left to right:
          - the first hit becomes the result;
          - past the municipal tier, a hit whose province and city are both
            unconfirmed clears the result;
          - within the municipal tier, a hit more specific than a city clears
            the result;
          - a hit inside the origin region always becomes the result.
        """
        result: Optional[str] = None
        found = False
        for i, suffix in enumerate(SUFFIXES):
            code = self._resolve_direct(term + suffix, origin_code, context)
            if code is None:
                continue
            if not found:
                result = code
                found = True
            if (
                i > MUNICIPAL_TIER
                and len(code) > PROVINCE_CODE_LENGTH
                and code[:PROVINCE_CODE_LENGTH] not in context.provinces
                and code[:CITY_CODE_LENGTH] not in context.cities
            ):
                result = None
            if i <= MUNICIPAL_TIER and len(code) > CITY_CODE_LENGTH:
                result = None
            if origin_code is not None and code.startswith(origin_code):
                result = code
        return result
