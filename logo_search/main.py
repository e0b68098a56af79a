"""
Logo Search - FastAPI application for logo lookup, facets and search

Read-only API over a static JSON collection of logo records:
- GET  /logo/{id}, POST /logo   identity lookup
- GET  /meta/industries         distinct industries (optionally counted)
- GET  /meta/keywords           distinct keywords (optionally counted)
- POST /search                  ranked search, returns id + asset URL
- POST /search/records          same search, returns full records

Architecture:
- Index is fetched once per process on first use (IndexCache) and kept
  read-only in memory
- Structured search scores records with independent matchers; a free-text
  `query` switches to the fuzzy matcher (rapidfuzz)
- Everything hangs off app.state, created in the lifespan handler
"""

import logging
import os
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

# Load .env.local first (highest priority), then .env as fallback
from dotenv import load_dotenv

env_local = Path(__file__).parent.parent / ".env.local"
env_file = Path(__file__).parent.parent / ".env"

if env_local.exists():
    load_dotenv(env_local, override=True)
elif env_file.exists():
    load_dotenv(env_file, override=True)

# Configure logging: console (brief) + file (detailed)
from logo_search.logging_config import setup_logging

setup_logging()

logger = logging.getLogger(__name__)

import httpx
from fastapi import Depends, FastAPI, HTTPException, Query as QueryParam, Request, Response, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field, field_validator

from logo_search.config import Settings
from logo_search.errors import InvalidInput
from logo_search.fuzzy import create_fuzzy_matcher
from logo_search.index_cache import IndexCache
from logo_search.models import LogoIndex, Record, resolve_asset_url
from logo_search.search import Query, SearchEngine, industry_facets, keyword_facets, sort_facets

APP_VERSION = "1.0.0"
PORT = int(os.getenv("PORT", "8080"))


# Request/Response models
class LogoOut(BaseModel):
    id: str
    category: Optional[str] = None
    categories: List[str] = Field(default_factory=list)
    keywords: List[str] = Field(default_factory=list)
    labels: List[str] = Field(default_factory=list)
    svg: Optional[str] = Field(None, description="Absolute URL of the logo asset")


class LogoResponse(BaseModel):
    logo: LogoOut


class LogoLookupRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str = ""

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> str:
        return value.strip() if isinstance(value, str) else ""


class SearchRequest(BaseModel):
    """
    Search body. Every field is optional and malformed values degrade to
    "not supplied" instead of failing the request.
    """
    model_config = ConfigDict(
        extra="ignore",
        json_schema_extra={
            "example": {
                "industries": ["Finance & Insurance"],
                "keywords": ["bank", "secure"],
                "mode": "OR",
                "description": "blue shield",
                "limit": 24,
            }
        },
    )

    industries: List[str] = Field(default_factory=list, description="Industry terms (ANY)")
    industry: Optional[str] = Field(None, description="Single industry, merged into industries")
    keywords: List[str] = Field(default_factory=list, description="Keywords, combined per mode")
    mode: str = Field("AND", description="AND (every keyword) or OR (at least one)")
    description: Optional[str] = Field(None, description="Free text matched against all record text")
    match_categories: bool = Field(False, description="Also match keywords against categories")
    query: Optional[str] = Field(None, description="Fuzzy text query; selects fuzzy search when present")
    limit: Any = Field(None, description="Max results, clamped to 1-200 (default 24)")

    @field_validator("industries", "keywords", mode="before")
    @classmethod
    def _coerce_list(cls, value: Any) -> List[str]:
        if isinstance(value, str):
            return [value]
        if isinstance(value, (list, tuple)):
            return [v for v in value if isinstance(v, str)]
        return []

    @field_validator("industry", "description", "query", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> Optional[str]:
        return value if isinstance(value, str) else None

    @field_validator("mode", mode="before")
    @classmethod
    def _coerce_mode(cls, value: Any) -> str:
        return value if isinstance(value, str) else "AND"

    @field_validator("match_categories", mode="before")
    @classmethod
    def _coerce_flag(cls, value: Any) -> bool:
        if isinstance(value, str):
            return value.strip().lower() in ("1", "true", "yes")
        return value is True or value == 1

    def to_query(self, settings: Settings) -> Query:
        industries = list(self.industries)
        if self.industry:
            industries.append(self.industry)
        return Query.build(
            industries=industries,
            keywords=self.keywords,
            mode=self.mode,
            description=self.description,
            text=self.query,
            limit=self.limit,
            match_categories=self.match_categories,
            default_limit=settings.default_limit,
            max_limit=settings.max_limit,
        )


class SearchHit(BaseModel):
    id: str
    svg: Optional[str] = None


class SearchResponse(BaseModel):
    results: List[SearchHit]
    total: int


class RecordSearchResponse(BaseModel):
    results: List[LogoOut]
    total: int


class IndustryCount(BaseModel):
    name: str
    count: int


class KeywordCount(BaseModel):
    term: str
    count: int


class IndustriesResponse(BaseModel):
    industries: Union[List[IndustryCount], List[str]]


class KeywordsResponse(BaseModel):
    keywords: Union[List[KeywordCount], List[str]]


class HealthResponse(BaseModel):
    status: str
    version: str
    started_at: str
    uptime_seconds: float
    index_loaded: bool
    records: int


def create_app(
    settings: Optional[Settings] = None,
    index_transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    """
    Build the application.

    Args:
        settings: Service settings (read from environment when omitted)
        index_transport: httpx transport for the index fetch (tests)
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Initialize per-process state"""
        app_settings = settings or Settings.from_env()
        app.state.settings = app_settings
        app.state.started_at = datetime.now(timezone.utc)
        app.state.index_cache = IndexCache(
            source_url=app_settings.index_url,
            timeout=app_settings.index_fetch_timeout,
            transport=index_transport,
        )
        app.state.engine = SearchEngine(
            weights=app_settings.scoring,
            fuzzy_matcher=create_fuzzy_matcher(app_settings.fuzzy.backend),
            fuzzy_settings=app_settings.fuzzy,
            max_limit=app_settings.max_limit,
        )
        logger.info(f"Logo search ready (index={app_settings.index_url}, fuzzy={app_settings.fuzzy.backend})")

        yield

        logger.info("Shutting down...")
        app.state.engine.close()

    app = FastAPI(
        title="Logo Search API",
        description="Lookup, facets and ranked search over the logo index",
        version=APP_VERSION,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type"],
    )

    _register_routes(app)
    return app


# Dependencies
def get_settings(request: Request) -> Settings:
    return request.app.state.settings


async def get_index(request: Request) -> LogoIndex:
    """Loaded index for this request (fetches on first use)."""
    return await request.app.state.index_cache.ensure_loaded(str(request.base_url))


def _asset_base(request: Request, settings: Settings) -> str:
    if settings.asset_base_url:
        return settings.asset_base_url
    return f"{request.url.scheme}://{request.url.netloc}/"


def _logo_out(record: Record, request: Request, settings: Settings) -> LogoOut:
    svg_url = resolve_asset_url(record.svg, _asset_base(request, settings), settings.asset_path)
    return LogoOut(**record.to_dict(svg_url))


async def _read_json(request: Request) -> Dict[str, Any]:
    """Request body as a dict; invalid or non-object JSON counts as empty."""
    try:
        body = await request.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


def _wants_counts(counts: Optional[str]) -> bool:
    return (counts or "").strip().lower() in ("1", "true", "yes")


def _register_routes(app: FastAPI):

    @app.get("/", response_model=dict)
    async def root():
        """Root endpoint"""
        return {
            "service": "Logo Search API",
            "version": APP_VERSION,
            "status": "running",
            "docs": "/docs",
        }

    @app.get("/health", response_model=HealthResponse)
    async def health(request: Request):
        """Health check (does not trigger an index fetch)"""
        started_at = request.app.state.started_at
        cache: IndexCache = request.app.state.index_cache
        return HealthResponse(
            status="healthy",
            version=APP_VERSION,
            started_at=started_at.isoformat(),
            uptime_seconds=round((datetime.now(timezone.utc) - started_at).total_seconds(), 2),
            index_loaded=cache.is_loaded,
            records=cache.size,
        )

    async def _lookup(logo_id: str, request: Request, response: Response, settings: Settings) -> LogoResponse:
        if not logo_id:
            raise InvalidInput("Logo ID is required")
        index = await get_index(request)
        record = index.get(logo_id)
        if record is None:
            logger.debug(f"Logo not found: {logo_id} ({len(index)} records)")
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Logo not found")
        response.headers["Cache-Control"] = f"public, max-age={settings.cache_max_age}"
        return LogoResponse(logo=_logo_out(record, request, settings))

    @app.get("/logo/{logo_id}", response_model=LogoResponse)
    async def get_logo(
        logo_id: str,
        request: Request,
        response: Response,
        settings: Settings = Depends(get_settings),
    ):
        """Get a logo by id, with its asset resolved to an absolute URL"""
        return await _lookup(logo_id.strip(), request, response, settings)

    @app.get("/logo/", include_in_schema=False)
    async def get_logo_without_id():
        """Reject an empty id segment"""
        raise InvalidInput("Logo ID is required")

    @app.post("/logo", response_model=LogoResponse)
    async def post_logo(request: Request, response: Response, settings: Settings = Depends(get_settings)):
        """
        Get a logo by id from a JSON body.

        Example:
            POST /logo
            {"id": "966294985"}
        """
        body = LogoLookupRequest.model_validate(await _read_json(request))
        return await _lookup(body.id, request, response, settings)

    @app.get("/meta/industries", response_model=IndustriesResponse)
    async def list_industries(
        response: Response,
        counts: Optional[str] = QueryParam(None, description="1 to include occurrence counts"),
        index: LogoIndex = Depends(get_index),
        settings: Settings = Depends(get_settings),
    ):
        """
        Distinct industries from category + categories.

        - `GET /meta/industries` -> {"industries": ["Finance & Insurance", ...]}
        - `GET /meta/industries?counts=1` -> {"industries": [{"name": ..., "count": 42}, ...]}
        """
        with_counts = _wants_counts(counts)
        facets = sort_facets(industry_facets(index), by_count=with_counts)
        response.headers["Cache-Control"] = f"public, max-age={settings.cache_max_age}"
        if with_counts:
            return IndustriesResponse(industries=[IndustryCount(name=f.name, count=f.count) for f in facets])
        return IndustriesResponse(industries=[f.name for f in facets])

    @app.get("/meta/keywords", response_model=KeywordsResponse)
    async def list_keywords(
        response: Response,
        counts: Optional[str] = QueryParam(None, description="1 to include occurrence counts"),
        index: LogoIndex = Depends(get_index),
        settings: Settings = Depends(get_settings),
    ):
        """
        Distinct keywords.

        - `GET /meta/keywords` -> {"keywords": ["analysis", "bank", ...]}
        - `GET /meta/keywords?counts=1` -> {"keywords": [{"term": ..., "count": 12}, ...]}
        """
        with_counts = _wants_counts(counts)
        facets = sort_facets(keyword_facets(index), by_count=with_counts)
        response.headers["Cache-Control"] = f"public, max-age={settings.cache_max_age}"
        if with_counts:
            return KeywordsResponse(keywords=[KeywordCount(term=f.name, count=f.count) for f in facets])
        return KeywordsResponse(keywords=[f.name for f in facets])

    async def _search(request: Request, settings: Settings) -> List[Record]:
        body = SearchRequest.model_validate(await _read_json(request))
        query = body.to_query(settings)
        index = await get_index(request)
        engine: SearchEngine = request.app.state.engine
        return await engine.search(index.records, query)

    @app.post("/search", response_model=SearchResponse)
    async def search(request: Request, response: Response, settings: Settings = Depends(get_settings)):
        """
        Ranked logo search, returning ids and asset URLs.

        **Structured search** (no `query` field):
        - `industries`: ANY match, exact (100) or substring (50); hard filter
        - `keywords` + `mode`: AND/OR, exact (30) or partial (15)
        - `description`: free-text tokens (20 each) over all record text
        - Keywords and description are OR'd; results ordered by score, then id
        - Without industries, keywords and description the result is empty

        **Fuzzy search** (`query` present):
        - Optional exact industry pre-filter
        - Weighted fuzzy match on keywords, category, categories
        - Empty `query` lists the first `limit` records in index order
        """
        records = await _search(request, settings)
        base = _asset_base(request, settings)
        response.headers["Cache-Control"] = "no-store"
        return SearchResponse(
            results=[
                SearchHit(id=r.id, svg=resolve_asset_url(r.svg, base, settings.asset_path))
                for r in records
            ],
            total=len(records),
        )

    @app.post("/search/records", response_model=RecordSearchResponse)
    async def search_records(request: Request, response: Response, settings: Settings = Depends(get_settings)):
        """Same search as /search, returning full records instead of id + URL"""
        records = await _search(request, settings)
        response.headers["Cache-Control"] = "no-store"
        return RecordSearchResponse(
            results=[_logo_out(r, request, settings) for r in records],
            total=len(records),
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request, exc):
        """Global exception handler"""
        logger.exception(f"Unhandled error on {request.url.path}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": "Internal server error",
                "detail": str(exc),
            },
        )


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "logo_search.main:app",
        host="0.0.0.0",
        port=PORT,
    )
