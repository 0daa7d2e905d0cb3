"""HTTP routing for serving an ArtifactBundle."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from fastapi import FastAPI
from fastapi.responses import HTMLResponse, PlainTextResponse, Response

from folio.core.utils import normalize_root, topic_key

if TYPE_CHECKING:
    from folio.core.types import ArtifactBundle

BundleLoader = Callable[[], "ArtifactBundle | None"]

HTML_SUFFIX = ".html"


def _strip_html(name: str) -> str:
    return name.removesuffix(HTML_SUFFIX)


def create_app(load_bundle: BundleLoader, *, root: str = "/", logger: logging.Logger | None = None) -> FastAPI:
    """Create the FastAPI application serving the bundle returned by ``load_bundle``.

    Each request calls ``load_bundle`` exactly once and answers from that
    bundle only, so a swap between requests is never observed half-way.

    Routes (``R`` is the normalized root prefix):
        ``GET R/`` and ``GET R/posts``: landing page
        ``GET R/posts/{slug}``: a post, 404 if unknown
        ``GET R/tags``: the tags index
        ``GET R/tags/{name}``: a tag page, 404 if unknown

    Post and tag names may carry a ``.html`` suffix, matching the links of a
    site generated with ``link_extension=".html"``. Tag names match
    case-insensitively.

    Every route answers 503 while ``load_bundle`` returns None.
    """
    logger = logger or logging.getLogger(__name__)
    prefix = normalize_root(root)

    app = FastAPI(title="Folio", docs_url=None, redoc_url=None, openapi_url=None)

    def unavailable() -> Response:
        logger.error("Handler not initialized: no site has been generated yet")
        return PlainTextResponse("Service Unavailable", status_code=503)

    def not_found() -> Response:
        return Response(status_code=404)

    @app.get(f"{prefix}/", response_class=HTMLResponse)
    @app.get(f"{prefix}/posts", response_class=HTMLResponse)
    def landing() -> Response:
        bundle = load_bundle()
        if bundle is None:
            return unavailable()
        return HTMLResponse(bundle.landing)

    @app.get(f"{prefix}/posts/{{slug}}", response_class=HTMLResponse)
    def post(slug: str) -> Response:
        bundle = load_bundle()
        if bundle is None:
            return unavailable()
        content = bundle.posts.get(slug)
        if content is None:
            content = bundle.posts.get(_strip_html(slug))
        if content is None:
            return not_found()
        return HTMLResponse(content)

    @app.get(f"{prefix}/tags", response_class=HTMLResponse)
    @app.get(f"{prefix}/tags/index.html", response_class=HTMLResponse)
    def topics_index() -> Response:
        bundle = load_bundle()
        if bundle is None:
            return unavailable()
        return HTMLResponse(bundle.topics_index)

    @app.get(f"{prefix}/tags/{{name}}", response_class=HTMLResponse)
    def topic(name: str) -> Response:
        bundle = load_bundle()
        if bundle is None:
            return unavailable()
        content = bundle.topics.get(name)
        if content is None:
            content = bundle.topics.get(topic_key(_strip_html(name)))
        if content is None:
            return not_found()
        return HTMLResponse(content)

    return app
