"""CLI entrypoint for geotagger."""

from __future__ import annotations

import argparse
import json
from typing import Optional

from geotagger.logging_config import setup_logging
from geotagger.pipeline import OUTPUT_FORMATS


def main() -> None:
    parser = argparse.ArgumentParser(prog="geotagger")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log every resolver decision")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("serve")

    run_parser = sub.add_parser("run")
    run_parser.add_argument("--input", required=True, help="Article CSV")
    run_parser.add_argument("--output", required=True)
    run_parser.add_argument("--format", choices=OUTPUT_FORMATS, default="text")

    tag_parser = sub.add_parser("tag")
    tag_parser.add_argument("text")
    origin = tag_parser.add_mutually_exclusive_group()
    origin.add_argument("--origin", default=None, help="Origin region code, e.g. 11")
    origin.add_argument("--newspaper", default=None, help="Look the origin up in the newspaper list")

    args = parser.parse_args()
    setup_logging("DEBUG" if args.verbose else None)

    if args.command == "serve":
        _serve()
    elif args.command == "run":
        _run_once(args.input, args.output, args.format)
    elif args.command == "tag":
        _tag_once(args.text, args.origin, args.newspaper)


def _serve() -> None:
    import uvicorn

    from geotagger.config import get_settings

    settings = get_settings()
    uvicorn.run(
        "geotagger.api:app",
        host=settings.api.host,
        port=settings.api.port,
        reload=(settings.env == "development"),
        log_level=settings.log_level.lower(),
    )


def _run_once(input_csv: str, output: str, fmt: str) -> None:
    from geotagger.pipeline import run_pipeline

    stats = run_pipeline(input_csv, output, fmt=fmt)
    print(f"Pipeline completed: {stats}")


def _tag_once(text: str, origin: Optional[str], newspaper: Optional[str]) -> None:
    from geotagger.config import get_settings
    from geotagger.ingest import TextNormalizer, load_newspaper_list, origin_for
    from geotagger.pipeline import build_tagger, tag_text, to_match_out

    settings = get_settings()
    tagger = build_tagger(settings)
    if origin is None and newspaper:
        origin = origin_for(load_newspaper_list(settings.news.newspaper_list), newspaper)
    normalizer = TextNormalizer(settings.news.traditional_origins, settings.news.opencc_profile)

    _, matches = tag_text(tagger, normalizer, text, origin, settings.tagger.sentence_delimiters)
    out = [to_match_out(m).model_dump() for m in matches]
    print(json.dumps({"origin_code": origin, "matches": out}, ensure_ascii=False, indent=2))


if __name__ == "__main__":
    main()
