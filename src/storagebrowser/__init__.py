"""
storagebrowser - resolve paths in a remote node tree and download files with progress.

Core Components:
- nodes: Remote entry descriptors and listing lookups
- resolver: Path-to-node resolution
- browser: Login, root discovery and the public query surface
- downloader: Local preparation and progress-reporting transfers
- progress: Progress channel and reporter thread
- interfaces: Collaborator interfaces
"""

from .browser import StorageBrowser
from .config import BrowserConfig, load_config
from .downloader import ProgressDownloader
from .exceptions import (
    BrowserNotInitializedError,
    EmptyPathError,
    NodeNotFoundError,
    RootNodeNotFoundError,
    StorageBrowserError,
)
from .interfaces import LocalFileSystem, RemoteFileSystem, StorageClient
from .nodes import Entry, NodeKind
from .resolver import PathResolver

__all__ = [
    "BrowserConfig",
    "BrowserNotInitializedError",
    "EmptyPathError",
    "Entry",
    "LocalFileSystem",
    "NodeKind",
    "NodeNotFoundError",
    "PathResolver",
    "ProgressDownloader",
    "RemoteFileSystem",
    "RootNodeNotFoundError",
    "StorageBrowser",
    "StorageBrowserError",
    "StorageClient",
    "load_config",
]
