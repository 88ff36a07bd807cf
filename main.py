"""
Main API module for shorturl.

Responsibilities:
    - Serve the home page with the URL submission form
    - Accept URLs (HTML form and JSON API), store them and hand back an alias
    - Redirect /{alias} to the stored URL

Architecture:
    - App Factory pattern (create_app) for test isolation and DI.
    - In-memory Storage by default; PostgreSQL via SHORTURL_STORAGE_BACKEND=postgres.
    - UrlManager owns validation, the two-phase insert/alias write, and lookups.
    - The table is created on demand when the app starts.
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, Dict, Optional
from urllib.parse import quote

from fastapi import FastAPI, Form, HTTPException, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates
from pydantic import BaseModel

from shorturl.config import settings
from shorturl.errors import AliasNotFound, InvalidURL, StoreFailure
from shorturl.manager.url_manager import UrlManager
from shorturl.storage.base import BaseStorage
from shorturl.storage.storage_factory import get_storage

TEMPLATE_DIR = Path(__file__).resolve().parent / "shorturl" / "templates"


class ShortenRequest(BaseModel):
    """Request payload for the JSON API."""
    url: str


def create_app(storage: Optional[BaseStorage] = None) -> FastAPI:
    """
    Factory function to build and configure a new FastAPI app instance.

    Args:
        storage (Optional[BaseStorage]): Backend to use; chosen from the
            environment via get_storage() when omitted.

    Returns:
        FastAPI: A configured application with its own storage and manager.
    """
    log = logging.getLogger("shorturl.app")

    # basic console logging
    if not logging.getLogger().handlers:
        logging.basicConfig(
            level=getattr(logging, settings.LOG_LEVEL, logging.INFO),
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )

    if storage is None:
        storage = get_storage()
    manager = UrlManager(storage=storage)
    templates = Jinja2Templates(directory=str(TEMPLATE_DIR))

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        storage.ensure_schema()
        log.info("shorturl storage backend: %s", type(storage).__name__)
        yield

    app = FastAPI(
        title="shorturl",
        description="URL shortener with aliases derived from record ids",
        docs_url="/_docs",
        redoc_url="/_redoc",
        openapi_url="/_openapi.json",
        lifespan=lifespan,
    )
    app.state.storage = storage
    app.state.manager = manager

    # ----------------------------------------------------------------
    # Routes
    # ----------------------------------------------------------------
    # Underscore is outside the alias alphabet, so these never shadow an alias.
    @app.get("/_health")
    def health():
        return {"status": "ok"}

    @app.get("/", response_class=HTMLResponse, include_in_schema=False)
    def home(request: Request, alias: str = ""):
        """Render the submission form, plus the short URL when ?alias= is present."""
        short_url = str(request.base_url) + quote(alias, safe="") if alias else ""
        return templates.TemplateResponse(
            request,
            "index.html",
            {"alias": alias, "short_url": short_url},
        )

    @app.post("/", include_in_schema=False)
    def create_from_form(url: str = Form("")):
        """Create a short URL from the HTML form and bounce back to the home page."""
        try:
            record = manager.create_short_url(url)
        except InvalidURL:
            raise HTTPException(status_code=400, detail="Invalid URL")
        except StoreFailure:
            log.exception("Error inserting URL")
            raise HTTPException(status_code=500, detail="Internal server error")
        return RedirectResponse(url="/?alias=" + quote(record.alias, safe=""), status_code=303)

    @app.post("/api/urls", status_code=201)
    def create_from_api(req: ShortenRequest, request: Request) -> Dict[str, Any]:
        """
        Create a short URL from a JSON payload.

        Returns:
            dict: id, alias, url, created_at and the absolute short_url.

        Raises:
            HTTPException: 400 for an invalid URL, 500 if the store fails.
        """
        try:
            record = manager.create_short_url(req.url)
        except InvalidURL as exc:
            raise HTTPException(status_code=400, detail=str(exc))
        except StoreFailure:
            log.exception("Error inserting URL")
            raise HTTPException(status_code=500, detail="Internal server error")

        body = record.to_dict()
        body["short_url"] = str(request.url_for("redirect_alias", alias=record.alias))
        return body

    @app.get("/{alias}", name="redirect_alias")
    def redirect_alias(alias: str) -> RedirectResponse:
        """Redirect to the URL stored under `alias`, or 404."""
        try:
            url = manager.resolve_alias(alias)
        except AliasNotFound:
            raise HTTPException(status_code=404, detail="Short URL not found")
        except StoreFailure:
            log.exception("Redirect error")
            raise HTTPException(status_code=500, detail="Server error")
        return RedirectResponse(url=url, status_code=302)

    return app


# `uvicorn main:app` and `from main import app` continue to work.
app = create_app()


if __name__ == "__main__":
    import uvicorn

    logging.getLogger("shorturl.app").info(
        "Server running on http://%s:%s", settings.HOST, settings.PORT
    )
    uvicorn.run(app, host=settings.HOST, port=settings.PORT, log_level=settings.LOG_LEVEL.lower())
