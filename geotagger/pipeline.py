"""
Pipeline orchestrator.
Ties together ingest -> clean/normalize -> tag -> serialize for one CSV of
articles. Called from the CLI.
"""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Iterable, Optional, TextIO

from geotagger.config import Settings, get_settings
from geotagger.gazetteer import load_gazetteer
from geotagger.ingest import (
    NewsCsvReader,
    TextNormalizer,
    clean_text,
    load_newspaper_list,
    origin_for,
)
from geotagger.models import MatchOut, TaggedRecord
from geotagger.resolver import Resolver
from geotagger.tokenizer import DEFAULT_DELIMITERS, GeoTagger, Match, split_sentences

logger = logging.getLogger(__name__)

OUTPUT_FORMATS = ("text", "jsonl")


def build_tagger(settings: Optional[Settings] = None) -> GeoTagger:
    """Load the configured gazetteer and wrap it in a GeoTagger."""
    settings = settings or get_settings()
    gazetteer = load_gazetteer(settings.gazetteer.path)
    return GeoTagger(
        Resolver(gazetteer),
        max_window=settings.tagger.max_window,
        min_window=settings.tagger.min_window,
    )


# ── Sinks ─────────────────────────────────────────────────────────────

def format_text_line(record_id: str, matches: Iterable[Match]) -> str:
    """Legacy format: ``<id> <term>,code:<code> <term>,code:<code> \\n``."""
    parts = [f"{record_id} "]
    parts.extend(f"{m.text},code:{m.code} " for m in matches)
    parts.append("\n")
    return "".join(parts)


def to_match_out(match: Match) -> MatchOut:
    return MatchOut(
        text=match.text,
        start=match.span.start,
        end=match.span.end,
        sentence=match.sentence,
        code=match.code,
    )


def format_jsonl_line(
    record_id: str,
    matches: Iterable[Match],
    newspaper: Optional[str] = None,
    origin_code: Optional[str] = None,
) -> str:
    record = TaggedRecord(
        record_id=record_id,
        newspaper=newspaper,
        origin_code=origin_code,
        matches=[to_match_out(m) for m in matches],
    )
    return record.model_dump_json() + "\n"


# ── Run ───────────────────────────────────────────────────────────────

def tag_text(
    tagger: GeoTagger,
    normalizer: Optional[TextNormalizer],
    raw_text: str,
    origin_code: Optional[str],
    delimiters: str,
) -> tuple[list[str], list[Match]]:
    """Clean, normalize, split and tag one article."""
    text = clean_text(raw_text)
    if normalizer is not None:
        text = normalizer.normalize(text, origin_code)
    sentences = split_sentences(text, delimiters)
    return sentences, tagger.tag_document(sentences, origin_code)


def tag_records(
    records: Iterable,
    tagger: GeoTagger,
    newspapers: dict[str, str],
    normalizer: Optional[TextNormalizer],
    out: TextIO,
    fmt: str = "text",
    delimiters: str = DEFAULT_DELIMITERS,
) -> dict:
    """Tag every record and write one output line per record."""
    if fmt not in OUTPUT_FORMATS:
        raise ValueError(f"Unknown output format '{fmt}', expected one of {OUTPUT_FORMATS}")

    stats = {
        "records": 0,
        "records_with_matches": 0,
        "matches": 0,
        "unknown_newspapers": 0,
    }
    for record in records:
        origin = origin_for(newspapers, record.newspaper)
        if origin is None:
            stats["unknown_newspapers"] += 1

        _, matches = tag_text(tagger, normalizer, record.text, origin, delimiters)

        if fmt == "jsonl":
            out.write(format_jsonl_line(record.record_id, matches, record.newspaper, origin))
        else:
            out.write(format_text_line(record.record_id, matches))

        stats["records"] += 1
        stats["matches"] += len(matches)
        if matches:
            stats["records_with_matches"] += 1
    return stats


def run_pipeline(
    input_csv: str | Path,
    output_path: str | Path,
    fmt: str = "text",
    settings: Optional[Settings] = None,
    tagger: Optional[GeoTagger] = None,
) -> dict:
    """
    Execute the full pipeline:
      1. Load: gazetteer + newspaper origin table
      2. Tag: clean, normalize and tag every CSV row
      3. Serialize: one output line per row

    Returns a stats dict summarizing the run.
    """
    settings = settings or get_settings()
    start_time = time.monotonic()
    stats: dict = {"records": 0, "skipped": 0, "matches": 0}

    try:
        logger.info("=== Pipeline Stage 1: Loading dictionaries ===")
        if tagger is None:
            tagger = build_tagger(settings)
        newspapers = load_newspaper_list(settings.news.newspaper_list)
        normalizer = TextNormalizer(settings.news.traditional_origins, settings.news.opencc_profile)

        logger.info("=== Pipeline Stage 2: Tagging %s ===", input_csv)
        reader = NewsCsvReader(input_csv, settings.news.csv_encoding)
        with Path(output_path).open("w", encoding="utf-8") as out:
            stats.update(tag_records(
                reader, tagger, newspapers, normalizer, out,
                fmt=fmt, delimiters=settings.tagger.sentence_delimiters,
            ))
        stats["skipped"] = reader.skipped

        elapsed = time.monotonic() - start_time
        stats["duration_seconds"] = round(elapsed, 2)
        logger.info("=== Pipeline complete in %.1fs: %s ===", elapsed, stats)
        return stats

    except Exception as e:
        elapsed = time.monotonic() - start_time
        stats["duration_seconds"] = round(elapsed, 2)
        logger.error("Pipeline failed after %.1fs (%s): %s", elapsed, stats, e, exc_info=True)
        raise

