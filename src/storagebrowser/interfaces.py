"""
Collaborator interfaces for storagebrowser.

The browser and the downloader only talk to the outside world through these
abstract classes, so any storage backend or filesystem can be injected.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, List, Optional

from storagebrowser.nodes import Entry

if TYPE_CHECKING:
    from storagebrowser.progress import ProgressChannel


class StorageClient(ABC):
    """
    Abstract base class for an authenticated remote storage session.
    """

    @abstractmethod
    def login(self, user: str, password: str) -> None:
        """
        Authenticate against the storage service.

        Raises:
            Exception: Any client-defined error; callers propagate it unchanged.
        """

    @abstractmethod
    def transfer(
        self,
        node: Entry,
        destination: str,
        progress: Optional["ProgressChannel"] = None,
    ) -> None:
        """
        Download the bytes of `node` to the absolute path `destination`.

        Parameters:
            node (Entry): The file node to download.
            destination (str): Absolute local path to write to.
            progress (Optional[ProgressChannel]): When given, the length of every received
                chunk is sent to it, and it is closed once the transfer ends (successfully or not).
        """


class RemoteFileSystem(ABC):
    """
    Abstract base class for navigating the remote node tree.
    """

    @abstractmethod
    def get_root(self) -> Entry:
        """Return the node at the top of the remote tree."""

    @abstractmethod
    def list_children(self, node: Optional[Entry]) -> List[Entry]:
        """
        Return the children of `node` in the order the service reports them.

        `node` may be None when a hash lookup found nothing; implementations
        decide how to fail in that case.
        """

    @abstractmethod
    def hash_lookup(self, node_hash: str) -> Optional[Entry]:
        """Return the node identified by `node_hash`, or None if it is unknown."""


class LocalFileSystem(ABC):
    """
    Abstract base class for the local filesystem operations a download needs.
    """

    @abstractmethod
    def exists(self, path: str) -> bool:
        """Return whether `path` exists."""

    @abstractmethod
    def remove(self, path: str) -> None:
        """Remove the file at `path`."""

    @abstractmethod
    def make_dirs(self, path: str, mode: int) -> None:
        """Create `path` and any missing parents with permission bits `mode`."""

    @abstractmethod
    def getcwd(self) -> str:
        """Return the process's current working directory."""
