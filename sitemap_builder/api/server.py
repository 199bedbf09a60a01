"""
FastAPI server for serving a cached sitemap.
Provides the sitemap itself plus endpoints to manage its URL list.
"""

from typing import List, Optional, Union
from datetime import datetime, timezone
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel

from sitemap_builder.config import get_config
from sitemap_builder.errors import SitemapError
from sitemap_builder.logging_config import setup_logging, get_logger
from sitemap_builder.sitemap.document import Sitemap
from sitemap_builder.sitemap.item import EntryConfig

logger = get_logger("api.server")


# Pydantic models
class UrlCreate(BaseModel):
    url: str
    lastmod: Optional[str] = None
    lastmod_iso: Optional[str] = None
    changefreq: Optional[str] = None
    priority: Optional[float] = None
    img: Optional[Union[str, List[str]]] = None

    def to_entry(self) -> EntryConfig:
        return EntryConfig(
            url=self.url,
            lastmod=self.lastmod,
            lastmod_iso=self.lastmod_iso,
            changefreq=self.changefreq,
            priority=self.priority,
            img=self.img,
        )


class UrlResponse(BaseModel):
    url: str
    changefreq: Optional[str] = None
    priority: Optional[float] = None


class CountResponse(BaseModel):
    count: int


def build_sitemap() -> Sitemap:
    """Sitemap document from the loaded configuration."""
    config = get_config()
    return Sitemap(config.urls, hostname=config.hostname, cache_time=config.cache_time)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    config = get_config()
    setup_logging(level=config.log_level)
    if getattr(app.state, "sitemap", None) is None:
        app.state.sitemap = build_sitemap()
    logger.info(
        "API server starting",
        extra={"entries": len(app.state.sitemap)}
    )

    yield

    logger.info("API server stopping")


def create_app(sitemap: Optional[Sitemap] = None) -> FastAPI:
    """Create the app; ``sitemap`` overrides the configured document."""
    app = FastAPI(
        title="Sitemap Builder API",
        description="Serves a cached sitemaps.org sitemap",
        version="1.0.0",
        lifespan=lifespan
    )
    app.state.sitemap = sitemap

    @app.exception_handler(SitemapError)
    async def sitemap_error_handler(request: Request, exc: SitemapError):
        logger.warning(f"Sitemap error: {exc}", extra={"url": str(request.url)})
        return JSONResponse(status_code=422, content={"detail": str(exc)})

    # ==================== HEALTH ====================

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        sitemap: Sitemap = app.state.sitemap
        return {
            "status": "healthy",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "entries": len(sitemap),
            "cache_valid": sitemap.is_cache_valid(),
        }

    # ==================== SITEMAP ====================

    @app.get("/sitemap.xml")
    async def get_sitemap():
        """Rendered sitemap, served from cache while it is fresh."""
        xml = await app.state.sitemap.render_async()
        return Response(content=xml, media_type="application/xml")

    # ==================== URL ENDPOINTS ====================

    @app.get("/api/urls", response_model=List[UrlResponse])
    async def get_urls():
        """List the entries of the sitemap in render order."""
        return [
            UrlResponse(
                url=e.url,
                changefreq=e.changefreq,
                priority=e.priority if isinstance(e.priority, (int, float)) else None,
            )
            for e in app.state.sitemap.urls
        ]

    @app.post("/api/urls", response_model=CountResponse)
    async def add_url(url: UrlCreate):
        """
        Add a URL. The cache is not cleared, so the change shows up once
        the cache expires or is cleared. Invalid entries are rejected
        before they are stored.
        """
        entry = url.to_entry()
        app.state.sitemap.check(entry)
        count = app.state.sitemap.add(entry)
        logger.info("URL added", extra={"url": url.url, "entries": count})
        return CountResponse(count=count)

    @app.delete("/api/urls", response_model=CountResponse)
    async def remove_url(url: str):
        """Remove every entry with the given URL."""
        removed = app.state.sitemap.remove(url)
        if removed == 0:
            raise HTTPException(status_code=404, detail="URL not found in sitemap")
        logger.info(f"Removed {removed} entries", extra={"url": url})
        return CountResponse(count=removed)

    @app.post("/api/cache/clear")
    async def clear_cache():
        """Drop the cached sitemap so the next request renders it again."""
        app.state.sitemap.clear_cache()
        return {"status": "cleared"}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
