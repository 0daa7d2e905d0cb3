from folio.infra.sinks.directory import DirectoryWriter

__all__ = ["DirectoryWriter"]
