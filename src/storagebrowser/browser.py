"""
Browsing a remote storage service by path.
"""

from typing import List, Optional

from storagebrowser.config import BrowserConfig
from storagebrowser.downloader import ProgressDownloader
from storagebrowser.exceptions import (
    BrowserAlreadyInitializedError,
    BrowserNotInitializedError,
    NodeNotFoundError,
    RootNodeNotFoundError,
)
from storagebrowser.interfaces import LocalFileSystem, RemoteFileSystem, StorageClient
from storagebrowser.log_utils import logger
from storagebrowser.nodes import Entry, NodeKind
from storagebrowser.resolver import PathResolver


def get_root_node_hash(nodes: List[Entry], root_directory_name: str) -> str:
    """
    Return the hash of the first directory named `root_directory_name`.

    Raises:
        RootNodeNotFoundError: If `nodes` holds no such directory.
    """
    for node in nodes:
        if node.name == root_directory_name and node.kind == NodeKind.DIRECTORY:
            return node.hash
    raise RootNodeNotFoundError()


class StorageBrowser:
    """
    Maps paths below a configured root directory to remote nodes and downloads them.

    A browser starts uninitialized. initialize() logs in and caches the hash of
    the root directory; that hash is never changed afterwards. To start over,
    build a new browser.
    """

    def __init__(
        self,
        config: BrowserConfig,
        client: StorageClient,
        remote_fs: RemoteFileSystem,
        downloader: Optional[ProgressDownloader] = None,
        local_fs: Optional[LocalFileSystem] = None,
    ) -> None:
        self.config = config
        self.client = client
        self.remote_fs = remote_fs
        self.resolver = PathResolver(config.path_separator)
        if downloader is None:
            downloader = ProgressDownloader(client, local_fs)
        self.downloader = downloader
        self.root_node_hash = ""
        self._initialized = False

    @property
    def initialized(self) -> bool:
        return self._initialized

    def initialize(self) -> None:
        """
        Log in and locate the configured root directory.

        Login and listing errors are raised unchanged; the browser then stays
        uninitialized.

        Raises:
            BrowserAlreadyInitializedError: If a previous call succeeded.
            RootNodeNotFoundError: If the remote root has no directory with the configured name.
        """
        if self._initialized:
            raise BrowserAlreadyInitializedError()
        self.client.login(self.config.user, self.config.password)
        children = self.remote_fs.list_children(self.remote_fs.get_root())
        root_node_hash = get_root_node_hash(children, self.config.root_directory_name)
        self.root_node_hash = root_node_hash
        self._initialized = True
        logger.info(
            f"Using remote directory {self.config.root_directory_name} as root ({root_node_hash})"
        )

    def get_object_node(self, path: str) -> str:
        """
        Return the hash of the file at `path`, relative to the root directory.

        Raises:
            BrowserNotInitializedError: If initialize() has not succeeded.
            EmptyPathError: If `path` is empty.
            NodeNotFoundError: If a component of `path` does not exist.
        """
        if not self.initialized:
            raise BrowserNotInitializedError()
        return self.resolver.resolve(path, self.root_node_hash, self._list_children)

    def get_node(self, node_hash: str) -> Entry:
        """
        Return the node identified by `node_hash`.

        Raises:
            NodeNotFoundError: If the remote filesystem does not know the hash.
        """
        node = self.remote_fs.hash_lookup(node_hash)
        if node is None:
            raise NodeNotFoundError("node", node_hash)
        return node

    def update_file(self, node: Entry, local_path: str) -> None:
        """Download `node` to `local_path`, replacing any existing file."""
        self.downloader.download_file(node, local_path)

    def fetch(self, path: str, local_path: str) -> Entry:
        """
        Resolve `path` and download the file it names to `local_path`.

        Returns:
            Entry: The downloaded node.
        """
        node = self.get_node(self.get_object_node(path))
        self.update_file(node, local_path)
        return node

    def _list_children(self, node_hash: str) -> List[Entry]:
        return self.remote_fs.list_children(self.remote_fs.hash_lookup(node_hash))
