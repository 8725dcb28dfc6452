"""
HTTP adapter for a JSON node storage API.

The service is expected to expose:

- ``POST /login`` taking ``{"user", "password"}`` and returning ``{"token"}``
- ``GET /nodes/root`` and ``GET /nodes/<hash>`` returning a node
- ``GET /nodes/<hash>/children`` returning a list of nodes
- ``GET /nodes/<hash>/content`` returning the file's bytes

where a node is ``{"name", "type", "hash", "size"}`` and ``type`` is 0 for
files and 1 for directories.
"""

import os
import time
from typing import Any, List, Optional
from urllib.parse import quote

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from storagebrowser.constants import (
    DEFAULT_BACKOFF_FACTOR,
    DEFAULT_CHUNK_SIZE,
    DEFAULT_CONNECT_RETRIES,
    DEFAULT_REQUEST_TIMEOUT,
    RETRY_STATUS_FORCELIST,
)
from storagebrowser.interfaces import RemoteFileSystem, StorageClient
from storagebrowser.log_utils import logger
from storagebrowser.nodes import Entry
from storagebrowser.progress import ProgressChannel


def build_session() -> requests.Session:
    """
    Create a requests Session that retries idempotent requests on transient failures.

    Returns:
        requests.Session: Session with an HTTPAdapter using a urllib3 Retry policy
        for GET and HEAD requests mounted for http and https.
    """
    session = requests.Session()
    retry_strategy = Retry(
        total=DEFAULT_CONNECT_RETRIES,
        connect=DEFAULT_CONNECT_RETRIES,
        read=DEFAULT_CONNECT_RETRIES,
        status=DEFAULT_CONNECT_RETRIES,
        backoff_factor=DEFAULT_BACKOFF_FACTOR,
        status_forcelist=list(RETRY_STATUS_FORCELIST),
        allowed_methods=frozenset({"GET", "HEAD"}),
        raise_on_status=False,
        respect_retry_after_header=True,
    )
    adapter = HTTPAdapter(max_retries=retry_strategy)
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    return session


class HttpStorageClient(StorageClient, RemoteFileSystem):
    """
    StorageClient and RemoteFileSystem talking to a storage service over HTTP.

    HTTP failures are raised as the requests exceptions they are.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.chunk_size = chunk_size
        self.session = session if session is not None else build_session()

    def _url(self, *parts: str) -> str:
        return "/".join([self.base_url, *parts])

    def _node_url(self, node_hash: str, *parts: str) -> str:
        return self._url("nodes", quote(node_hash, safe=""), *parts)

    def _get_json(self, url: str) -> Any:
        response = self.session.get(url, timeout=self.timeout)
        response.raise_for_status()
        return response.json()

    def login(self, user: str, password: str) -> None:
        response = self.session.post(
            self._url("login"),
            json={"user": user, "password": password},
            timeout=self.timeout,
        )
        response.raise_for_status()
        token = response.json().get("token")
        if token:
            self.session.headers["Authorization"] = f"Bearer {token}"
        logger.debug(f"Logged in to {self.base_url} as {user}")

    def close(self) -> None:
        self.session.close()

    def get_root(self) -> Entry:
        return Entry.from_dict(self._get_json(self._url("nodes", "root")))

    def list_children(self, node: Optional[Entry]) -> List[Entry]:
        if node is None:
            raise ValueError("cannot list children of an unknown node")
        payload = self._get_json(self._node_url(node.hash, "children"))
        return [Entry.from_dict(item) for item in payload]

    def hash_lookup(self, node_hash: str) -> Optional[Entry]:
        if not node_hash:
            return None
        response = self.session.get(self._node_url(node_hash), timeout=self.timeout)
        if response.status_code == 404:
            return None
        response.raise_for_status()
        return Entry.from_dict(response.json())

    def transfer(
        self,
        node: Entry,
        destination: str,
        progress: Optional[ProgressChannel] = None,
    ) -> None:
        """
        Stream the content of `node` into `destination`.

        Bytes go to a temporary sibling file that replaces `destination` only
        once the whole body arrived; the temporary file is removed on failure.
        `progress` receives each chunk's length and is closed on every exit path.
        """
        temp_path = f"{destination}.tmp.{os.getpid()}.{int(time.time() * 1000)}"
        downloaded_bytes = 0
        try:
            with self.session.get(
                self._node_url(node.hash, "content"),
                stream=True,
                timeout=self.timeout,
            ) as response:
                response.raise_for_status()
                with open(temp_path, "wb") as file:
                    for chunk in response.iter_content(chunk_size=self.chunk_size):
                        if not chunk:
                            continue
                        file.write(chunk)
                        downloaded_bytes += len(chunk)
                        if progress is not None:
                            progress.send(len(chunk))
            os.replace(temp_path, destination)
            logger.debug(
                f"Finished downloading {node.hash}: {downloaded_bytes} bytes written to {destination}"
            )
        except BaseException:
            if os.path.exists(temp_path):
                try:
                    os.remove(temp_path)
                except OSError as e_rm:
                    logger.error(f"Error removing temporary file {temp_path}: {e_rm}")
            raise
        finally:
            if progress is not None:
                progress.close()
