from folio.core.ports import BundleSink, DocumentDecoder, PageRenderer
from folio.engine.template_loader import JinjaPageRenderer
from folio.infra.sinks import DirectoryWriter
from folio.parsing.decoder import MarkdownDecoder


def test_default_components_satisfy_ports(tmp_path, recording_renderer):
    assert isinstance(MarkdownDecoder(), DocumentDecoder)
    assert isinstance(JinjaPageRenderer(), PageRenderer)
    assert isinstance(recording_renderer, PageRenderer)
    assert isinstance(DirectoryWriter(tmp_path), BundleSink)


def test_ports_reject_unrelated_objects():
    assert not isinstance(object(), DocumentDecoder)
    assert not isinstance(object(), BundleSink)
