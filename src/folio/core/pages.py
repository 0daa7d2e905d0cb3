"""Page data handed to the template renderer.

Every page carries the site-wide fields of :class:`SiteContext` plus the data
for its own kind of page. Templates build links through :meth:`SiteContext.link`
so a configured root prefix reaches every URL.
"""

from __future__ import annotations

from urllib.parse import quote

from pydantic import BaseModel, ConfigDict, Field

from folio.core.types import Document
from folio.core.utils import site_link, topic_key


class SiteContext(BaseModel):
    """Fields common to all rendered pages."""

    model_config = ConfigDict(frozen=True)

    site_title: str
    page_title: str
    description: str
    year: int
    root: str = "/"
    extension: str = ""

    def link(self, path: str = "") -> str:
        return site_link(self.root, path)

    def posts_link(self) -> str:
        # static output has no posts/ listing; the landing page lists every post
        return self.link("") if self.extension else self.link("posts")

    def tags_link(self) -> str:
        return self.link(f"tags/index{self.extension}") if self.extension else self.link("tags")

    def post_link(self, doc: Document) -> str:
        return self.link(f"posts/{doc.slug}{self.extension}")

    def topic_link(self, topic: str) -> str:
        """Link to the page of ``topic`` under its canonical, URL-quoted key."""
        return self.link(f"tags/{quote(topic_key(topic), safe='')}{self.extension}")


class PostPage(SiteContext):
    document: Document


class IndexPage(SiteContext):
    documents: list[Document] = Field(default_factory=list)
    total_posts: int = 0


class TopicPage(SiteContext):
    topic: str
    documents: list[Document] = Field(default_factory=list)
    post_count: int = 0


class TopicInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    post_count: int


class TopicsIndexPage(SiteContext):
    topics: list[TopicInfo] = Field(default_factory=list)
    total_topics: int = 0
