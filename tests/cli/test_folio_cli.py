import logging

import pytest
from typer.testing import CliRunner

from folio import __version__
from folio.cli.app import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def restore_root_logger():
    """The CLI callback installs a handler on the root logger; undo it after each test."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers = handlers
    root.setLevel(level)


@pytest.fixture
def output_dir(tmp_path):
    return tmp_path / "public"


def test_version():
    result = runner.invoke(app, ["--version"])

    assert result.exit_code == 0
    assert __version__ in result.output


def test_generate_writes_site(content_dir, write_post, output_dir):
    write_post("hello.md", title="Hello World", tags=["python"])

    result = runner.invoke(app, ["generate", str(content_dir), str(output_dir)])

    assert result.exit_code == 0, result.output
    assert (output_dir / "index.html").is_file()
    assert (output_dir / "posts" / "hello-world.html").is_file()
    assert (output_dir / "tags" / "python.html").is_file()
    assert (output_dir / "tags" / "index.html").is_file()


def test_generate_raw(content_dir, write_post, output_dir):
    write_post("hello.md", title="Hello World", tags=["python"])

    result = runner.invoke(app, ["generate", str(content_dir), str(output_dir), "--raw"])

    assert result.exit_code == 0, result.output
    assert (output_dir / "posts" / "hello-world.html").read_text() == "<p>Hello <strong>world</strong>.</p>"
    assert not (output_dir / "tags").exists()


def test_generate_reads_config_file(content_dir, write_post, output_dir):
    write_post("hello.md")
    (content_dir / ".folio.toml").write_text('[site]\ntitle = "Configured Blog"\n')

    result = runner.invoke(app, ["generate", str(content_dir), str(output_dir)])

    assert result.exit_code == 0, result.output
    assert "Configured Blog" in (output_dir / "index.html").read_text()


def test_flags_override_config_file(content_dir, write_post, output_dir):
    write_post("hello.md")
    (content_dir / ".folio.toml").write_text('[site]\ntitle = "Configured Blog"\n')

    result = runner.invoke(
        app, ["generate", str(content_dir), str(output_dir), "--site-title", "Flag Blog", "--root", "/blog"]
    )

    assert result.exit_code == 0, result.output
    index = (output_dir / "index.html").read_text()
    assert "Flag Blog" in index
    assert 'href="/blog/posts/hello-world"' in index


def test_generate_without_path_prints_hint():
    result = runner.invoke(app, ["generate"])

    assert result.exit_code == 1
    assert "please specify a path" in result.output


def test_generate_rejects_file_path(tmp_path):
    path = tmp_path / "post.md"
    path.write_text("x")

    result = runner.invoke(app, ["generate", str(path)])

    assert result.exit_code == 1
    assert "not a directory" in result.output


def test_generate_rejects_missing_path(tmp_path):
    result = runner.invoke(app, ["generate", str(tmp_path / "missing")])

    assert result.exit_code == 1
    assert "cannot access directory" in result.output


def test_generate_reports_scan_failures(content_dir, write_post, output_dir):
    write_post("good.md")
    write_post("bad.md", title=None)

    result = runner.invoke(app, ["generate", str(content_dir), str(output_dir)])

    assert result.exit_code == 1
    assert "bad.md" in result.output
    assert "--proceed-on-errors" in result.output
    assert not output_dir.exists()


def test_generate_proceeds_past_failures(content_dir, write_post, output_dir):
    write_post("good.md")
    write_post("bad.md", title=None)

    result = runner.invoke(app, ["generate", str(content_dir), str(output_dir), "--proceed-on-errors"])

    assert result.exit_code == 0, result.output
    assert (output_dir / "posts" / "hello-world.html").is_file()


def test_invalid_config_file(content_dir, write_post, output_dir):
    write_post("hello.md")
    (content_dir / ".folio.toml").write_text("[site\n")

    result = runner.invoke(app, ["generate", str(content_dir), str(output_dir)])

    assert result.exit_code == 1
    assert "Invalid Configuration" in result.output


def test_serve_fails_fast_on_bad_content(content_dir, write_post):
    write_post("bad.md", title=None)

    result = runner.invoke(app, ["serve", str(content_dir)])

    assert result.exit_code == 1
    assert "failed to refresh site" in result.output


def test_serve_runs_server(content_dir, write_post, monkeypatch):
    write_post("hello.md")
    started = []
    monkeypatch.setattr("folio.server.live.LiveServer.run", lambda self: started.append(self))

    result = runner.invoke(app, ["serve", str(content_dir), "--port", "9001", "--watch", "2"])

    assert result.exit_code == 0, result.output
    (server,) = started
    assert server.settings.port == 9001
    assert server.settings.watch_interval == 2
    assert "hello-world" in server.current_bundle().posts


def test_generate_with_link_extension(content_dir, write_post, output_dir):
    write_post("hello.md", tags=["Python"])

    result = runner.invoke(app, ["generate", str(content_dir), str(output_dir), "--link-extension", ".html"])

    assert result.exit_code == 0, result.output
    index = (output_dir / "index.html").read_text()
    assert 'href="/posts/hello-world.html"' in index
    assert 'href="/tags/index.html"' in index
    assert (output_dir / "tags" / "python.html").is_file()
