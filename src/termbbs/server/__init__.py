"""Network side of termbbs: the accept loop and per-connection sessions."""

from termbbs.server.listener import BoardServer
from termbbs.server.session import Session

__all__ = ["BoardServer", "Session"]
