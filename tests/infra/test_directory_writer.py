import re
from urllib.parse import unquote

import pytest

from folio.core.config import FolioConfig
from folio.core.exceptions import SinkError
from folio.core.types import ArtifactBundle, AssemblyMode
from folio.engine.generator import SiteGenerator
from folio.infra.sinks import DirectoryWriter


@pytest.fixture
def templated_bundle():
    return ArtifactBundle(
        mode=AssemblyMode.TEMPLATED,
        posts={"hello-world": b"<p>hello</p>", "second": b"<p>second</p>"},
        topics={"python": b"python page", "Go": b"go page"},
        landing=b"landing",
        topics_index=b"all tags",
    )


def snapshot(directory):
    return {
        path.relative_to(directory).as_posix(): path.read_bytes()
        for path in sorted(directory.rglob("*"))
        if path.is_file()
    }


def test_writes_templated_layout(tmp_path, templated_bundle):
    out = tmp_path / "public"

    DirectoryWriter(out).write(templated_bundle)

    assert snapshot(out) == {
        "index.html": b"landing",
        "posts/hello-world.html": b"<p>hello</p>",
        "posts/second.html": b"<p>second</p>",
        "tags/Go.html": b"go page",
        "tags/index.html": b"all tags",
        "tags/python.html": b"python page",
    }


def test_raw_bundle_skips_tags(tmp_path):
    bundle = ArtifactBundle(mode=AssemblyMode.RAW, posts={"hello-world": b"<p>hello</p>"})
    out = tmp_path / "public"

    DirectoryWriter(out).write(bundle)

    assert (out / "posts" / "hello-world.html").read_bytes() == b"<p>hello</p>"
    assert not (out / "tags").exists()


def test_rewriting_is_idempotent(tmp_path, templated_bundle):
    out = tmp_path / "public"
    writer = DirectoryWriter(out)

    writer.write(templated_bundle)
    first = snapshot(out)
    writer.write(templated_bundle)

    assert snapshot(out) == first


@pytest.mark.parametrize("name", ["", "..", "a/b", "a\\b"])
def test_unsafe_names_are_rejected(tmp_path, name):
    bundle = ArtifactBundle(mode=AssemblyMode.TEMPLATED, topics={name: b"x"}, landing=b"landing")

    with pytest.raises(SinkError, match="unsafe name"):
        DirectoryWriter(tmp_path / "public").write(bundle)


def test_unwritable_output_raises_sink_error(tmp_path, templated_bundle):
    blocker = tmp_path / "public"
    blocker.write_text("not a directory")

    with pytest.raises(SinkError, match="failed to write site"):
        DirectoryWriter(blocker).write(templated_bundle)


def test_static_site_links_resolve_to_written_files(tmp_path, content_dir, write_post):
    write_post("new.md", title="New", date="2024-06-01", tags=["web", "c#"])
    write_post("old.md", title="Old", date="2023-01-01", tags=["Web"])
    config = FolioConfig.model_validate({"site": {"link_extension": ".html"}})
    out = tmp_path / "public"

    DirectoryWriter(out).write(SiteGenerator.from_config(config).generate(content_dir))

    pages = list(out.rglob("*.html"))
    links = {link for page in pages for link in re.findall(r'href="([^"]+)"', page.read_text())}
    assert "/tags/web.html" in links
    for link in links:
        target = out / unquote(link).lstrip("/")
        if link.endswith("/"):
            target = target / "index.html"
        assert target.is_file(), link
