"""
FastAPI service exposing the geo-tagger.

Endpoints:
  POST /tag             - Tag a piece of text with administrative codes
  GET  /lookup/{name}   - All gazetteer units registered under a name
  GET  /health          - Loaded dictionary sizes
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware

from geotagger.config import get_settings
from geotagger.ingest import TextNormalizer, load_newspaper_list, origin_for
from geotagger.models import (
    GeoUnitResponse,
    HealthResponse,
    LookupResponse,
    TagRequest,
    TagResponse,
)
from geotagger.pipeline import build_tagger, tag_text, to_match_out
from geotagger.tokenizer import GeoTagger

logger = logging.getLogger(__name__)


def create_app(
    tagger: Optional[GeoTagger] = None,
    newspapers: Optional[dict[str, str]] = None,
    normalizer: Optional[TextNormalizer] = None,
) -> FastAPI:
    """
    Build the app. Anything not injected is loaded from settings at startup;
    a gazetteer that fails to load aborts startup.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        settings = get_settings()
        logger.info("Starting up geo-tagger API...")
        app.state.tagger = tagger or build_tagger(settings)
        app.state.newspapers = (
            newspapers if newspapers is not None
            else load_newspaper_list(settings.news.newspaper_list)
        )
        app.state.normalizer = normalizer or TextNormalizer(
            settings.news.traditional_origins, settings.news.opencc_profile,
        )
        yield
        logger.info("Geo-tagger API shut down.")

    app = FastAPI(
        title="Geo Tagger API",
        description="Tag Chinese text with province/city/district codes",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # tighten in production
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Plain def: matching is CPU-bound and runs in the threadpool, off the event loop.
    @app.post("/tag", response_model=TagResponse)
    def tag(body: TagRequest, request: Request):
        """
        Tag one document. ``origin_code`` wins over ``newspaper``; with
        neither, origin-priority disambiguation is disabled.
        """
        settings = get_settings()
        if len(body.text) > settings.api.max_text_length:
            raise HTTPException(413, f"text must be <= {settings.api.max_text_length} characters")

        state = request.app.state
        origin = body.origin_code or origin_for(state.newspapers, body.newspaper)
        sentences, matches = tag_text(
            state.tagger, state.normalizer, body.text, origin,
            settings.tagger.sentence_delimiters,
        )
        return TagResponse(
            origin_code=origin,
            sentences=len(sentences),
            matches=[to_match_out(m) for m in matches],
        )

    @app.get("/lookup/{name}", response_model=LookupResponse)
    async def lookup(name: str, request: Request):
        units = request.app.state.tagger.resolver.gazetteer.lookup(name)
        if not units:
            raise HTTPException(404, f"'{name}' is not in the gazetteer")
        return LookupResponse(
            name=name,
            units=[
                GeoUnitResponse(
                    name=u.name,
                    code=u.code,
                    level=u.level,
                    ancestors=[a.code for a in u.ancestors()],
                )
                for u in units
            ],
        )

    @app.get("/health", response_model=HealthResponse)
    async def health_check(request: Request):
        state = request.app.state
        return HealthResponse(
            status="ok",
            gazetteer_names=len(state.tagger.resolver.gazetteer),
            newspapers=len(state.newspapers),
        )

    return app


app = create_app()
