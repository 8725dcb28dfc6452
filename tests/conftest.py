import time
from typing import Dict, List, Optional

import platformdirs
import pytest
import requests

from storagebrowser.config import BrowserConfig
from storagebrowser.interfaces import RemoteFileSystem, StorageClient
from storagebrowser.nodes import Entry, NodeKind

_NETWORK_BLOCK_MSG = (
    "Network access is blocked during tests. Mock requests.* or Session.request."
)

ROOT_NAME = "proj"
REMOTE_ROOT_HASH = "remote-root"
PROJECT_ROOT_HASH = "R"


def _block_network(*_args, **_kwargs):
    """
    Prevent network calls in tests by raising a RuntimeError.

    Raises:
        RuntimeError: with `_NETWORK_BLOCK_MSG` indicating that network access is blocked during tests.
    """
    raise RuntimeError(_NETWORK_BLOCK_MSG)


@pytest.fixture(autouse=True)
def _isolate_test_environment(tmp_path_factory, monkeypatch):
    """
    Point platformdirs and the config module at a temporary directory and clear storagebrowser environment variables.
    """
    base = tmp_path_factory.mktemp("storagebrowser")
    config_dir = base / "config"
    log_dir = base / "log"
    for path in (config_dir, log_dir):
        path.mkdir(parents=True, exist_ok=True)

    monkeypatch.setenv("XDG_CONFIG_HOME", str(config_dir))
    monkeypatch.delenv("STORAGEBROWSER_PASSWORD", raising=False)
    monkeypatch.delenv("STORAGEBROWSER_LOG_LEVEL", raising=False)

    monkeypatch.setattr(
        platformdirs, "user_config_dir", lambda *_args, **_kwargs: str(config_dir)
    )
    monkeypatch.setattr(
        platformdirs, "user_log_dir", lambda *_args, **_kwargs: str(log_dir)
    )

    import storagebrowser.config as config_module

    monkeypatch.setattr(config_module, "CONFIG_DIR", str(config_dir))
    monkeypatch.setattr(
        config_module,
        "CONFIG_FILE",
        str(config_dir / config_module.CONFIG_FILE_NAME),
    )


def pytest_runtest_setup():
    """
    Prevent real network requests during tests by replacing requests entry points with a blocking callable.
    """
    requests.get = _block_network
    requests.post = _block_network
    requests.put = _block_network
    requests.delete = _block_network
    requests.head = _block_network
    requests.Session.request = _block_network


@pytest.fixture(autouse=True)
def _mock_time_sleep(monkeypatch):
    """
    Make time.sleep instant for all tests to prevent delays.
    """
    monkeypatch.setattr(time, "sleep", lambda *_args, **_kwargs: None)


# =============================================================================
# In-memory collaborators
# =============================================================================


class FakeRemoteFileSystem(RemoteFileSystem):
    """
    RemoteFileSystem over an in-memory tree.

    `tree` maps a directory hash to its listing. Every entry of every listing
    can be found with hash_lookup(); the remote root is found by its hash too.
    """

    def __init__(
        self,
        tree: Dict[str, List[Entry]],
        root: Optional[Entry] = None,
        list_error: Optional[Exception] = None,
    ) -> None:
        self.tree = tree
        self.root = root or Entry("", NodeKind.DIRECTORY, REMOTE_ROOT_HASH)
        self.list_error = list_error
        self.listed: List[Optional[str]] = []
        self.nodes = {self.root.hash: self.root}
        for children in tree.values():
            for child in children:
                self.nodes.setdefault(child.hash, child)

    def get_root(self) -> Entry:
        return self.root

    def list_children(self, node: Optional[Entry]) -> List[Entry]:
        self.listed.append(node.hash if node is not None else None)
        if self.list_error is not None:
            raise self.list_error
        if node is None:
            raise ValueError("cannot list children of an unknown node")
        return list(self.tree.get(node.hash, []))

    def hash_lookup(self, node_hash: str) -> Optional[Entry]:
        return self.nodes.get(node_hash)


class FakeStorageClient(StorageClient):
    """
    StorageClient that writes `content` in fixed-size chunks, reporting each one.
    """

    def __init__(
        self,
        content: bytes = b"",
        chunk_size: int = 100,
        login_error: Optional[Exception] = None,
        transfer_error: Optional[Exception] = None,
    ) -> None:
        self.content = content
        self.chunk_size = chunk_size
        self.login_error = login_error
        self.transfer_error = transfer_error
        self.logins: List[tuple] = []
        self.transfers: List[tuple] = []

    def login(self, user: str, password: str) -> None:
        self.logins.append((user, password))
        if self.login_error is not None:
            raise self.login_error

    def transfer(self, node, destination, progress=None) -> None:
        self.transfers.append((node, destination))
        try:
            if self.transfer_error is not None:
                raise self.transfer_error
            with open(destination, "wb") as f:
                for start in range(0, len(self.content), self.chunk_size):
                    chunk = self.content[start : start + self.chunk_size]
                    f.write(chunk)
                    if progress is not None:
                        progress.send(len(chunk))
        finally:
            if progress is not None:
                progress.close()


@pytest.fixture
def browser_config():
    return BrowserConfig(user="user", password="pass", root_directory_name=ROOT_NAME)


@pytest.fixture
def remote_tree():
    """
    Remote tree used by most browser tests::

        <remote root>
        ├── proj/                 (R)
        │   ├── dirA/             (HA)
        │   │   └── dirB/         (H1)
        │   │       └── file.txt  (H2, 200 bytes)
        │   └── top.txt           (HT, 10 bytes)
        └── x                     (Y)
    """
    return {
        REMOTE_ROOT_HASH: [
            Entry(ROOT_NAME, NodeKind.DIRECTORY, PROJECT_ROOT_HASH),
            Entry("x", NodeKind.FILE, "Y"),
        ],
        PROJECT_ROOT_HASH: [
            Entry("dirA", NodeKind.DIRECTORY, "HA"),
            Entry("top.txt", NodeKind.FILE, "HT", 10),
        ],
        "HA": [Entry("dirB", NodeKind.DIRECTORY, "H1")],
        "H1": [Entry("file.txt", NodeKind.FILE, "H2", 200)],
    }


@pytest.fixture
def remote_fs(remote_tree):
    return FakeRemoteFileSystem(remote_tree)


@pytest.fixture
def storage_client():
    return FakeStorageClient(content=b"a" * 200)
