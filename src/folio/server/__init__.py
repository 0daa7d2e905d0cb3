from folio.server.cache import SnapshotCache
from folio.server.live import LiveServer, ServerState

__all__ = ["LiveServer", "ServerState", "SnapshotCache"]
