"""Assemble decoded documents into the site's rendered artifacts."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from folio.core.exceptions import MissingRendererError, RenderError
from folio.core.pages import IndexPage, PostPage, SiteContext, TopicInfo, TopicPage, TopicsIndexPage
from folio.core.types import ArtifactBundle, AssemblyMode, DocumentCollection
from folio.core.utils import normalize_root, topic_key
from folio.engine.template_loader import INDEX_TEMPLATE, POST_TEMPLATE, TOPIC_TEMPLATE, TOPICS_INDEX_TEMPLATE

if TYPE_CHECKING:
    from folio.core.config import SiteSettings
    from folio.core.ports import PageRenderer


def _current_year() -> int:
    return datetime.now(UTC).year


@dataclass(frozen=True, slots=True)
class AssemblerConfig:
    """Configuration for :class:`SiteAssembler`.

    Attributes:
        mode: ``RAW`` emits bare post HTML only; ``TEMPLATED`` renders every page.
        site_title: Shown on every templated page.
        root: URL prefix joined into every link; ``"/"`` gives root-relative links.
        link_extension: Appended to post and tag links, e.g. ``".html"`` for static hosting.

    """

    mode: AssemblyMode = AssemblyMode.TEMPLATED
    site_title: str = "Folio"
    root: str = "/"
    link_extension: str = ""

    @classmethod
    def from_settings(cls, site: SiteSettings, *, raw_output: bool = False) -> AssemblerConfig:
        return cls(
            mode=AssemblyMode.RAW if raw_output else AssemblyMode.TEMPLATED,
            site_title=site.title,
            root=site.root,
            link_extension=site.link_extension,
        )


class SiteAssembler:
    """Builds an ArtifactBundle from a DocumentCollection.

    In templated mode any page that fails to render aborts the whole pass;
    a partially rendered bundle is never returned.
    """

    def __init__(
        self,
        config: AssemblerConfig | None = None,
        renderer: PageRenderer | None = None,
        *,
        clock: Callable[[], int] = _current_year,
        logger: logging.Logger | None = None,
    ) -> None:
        self.config = config or AssemblerConfig()
        self.renderer = renderer
        self.clock = clock
        self.logger = logger or logging.getLogger(__name__)

    def assemble(self, documents: DocumentCollection) -> ArtifactBundle:
        if self.config.mode is AssemblyMode.RAW:
            self.logger.info("Raw output enabled, ignoring templates")
            return self._assemble_raw(documents)
        return self._assemble_templated(documents)

    def _assemble_raw(self, documents: DocumentCollection) -> ArtifactBundle:
        posts = {doc.slug: doc.body_html.encode("utf-8") for doc in documents}
        return ArtifactBundle(mode=AssemblyMode.RAW, posts=posts)

    def _assemble_templated(self, documents: DocumentCollection) -> ArtifactBundle:
        if self.renderer is None:
            raise MissingRendererError
        renderer = self.renderer

        self.logger.debug("Rendering %d post(s) with templates", len(documents))
        ordered = documents.sorted_by_date()
        year = self.clock()

        def context(page_title: str, description: str) -> dict[str, object]:
            return {
                "site_title": self.config.site_title,
                "page_title": page_title,
                "description": description,
                "year": year,
                "root": normalize_root(self.config.root) or "/",
                "extension": self.config.link_extension,
            }

        posts: dict[str, bytes] = {}
        for doc in ordered:
            page = PostPage(**context(doc.title, doc.description), document=doc)
            posts[doc.slug] = self._render(renderer, POST_TEMPLATE, page, "post", doc.slug)

        index_page = IndexPage(
            **context("Home", "Recent blog posts"),
            documents=list(ordered),
            total_posts=len(ordered),
        )
        landing = self._render(renderer, INDEX_TEMPLATE, index_page, "index", "")

        topics: dict[str, bytes] = {}
        infos: list[TopicInfo] = []
        for topic in ordered.topics():
            tagged = ordered.filter_by_topic(topic)
            topic_page = TopicPage(
                **context(f"Tag: {topic}", f"Posts tagged with {topic}"),
                topic=topic,
                documents=list(tagged),
                post_count=len(tagged),
            )
            topics[topic_key(topic)] = self._render(renderer, TOPIC_TEMPLATE, topic_page, "tag page", topic)
            infos.append(TopicInfo(name=topic, post_count=len(tagged)))

        infos.sort(key=lambda info: (info.name.casefold(), info.name))
        topics_index_page = TopicsIndexPage(
            **context("All Tags", "Browse all topics covered in this blog"),
            topics=infos,
            total_topics=len(infos),
        )
        topics_index = self._render(renderer, TOPICS_INDEX_TEMPLATE, topics_index_page, "tags index", "")

        self.logger.debug("Rendered %d post page(s) and %d tag page(s)", len(posts), len(topics))
        return ArtifactBundle(
            mode=AssemblyMode.TEMPLATED,
            posts=posts,
            topics=topics,
            landing=landing,
            topics_index=topics_index,
        )

    def _render(self, renderer: PageRenderer, template: str, page: SiteContext, kind: str, name: str) -> bytes:
        try:
            return renderer.render(template, page)
        except Exception as exc:
            raise RenderError(kind, name, exc) from exc
