"""repodesk resource clients for the remote store."""

from repodesk.clients.commits import CommitsClient
from repodesk.clients.contents import ContentsClient
from repodesk.clients.git import GitDataClient
from repodesk.clients.repos import ReposClient

__all__ = [
    "ContentsClient",
    "CommitsClient",
    "ReposClient",
    "GitDataClient",
]
