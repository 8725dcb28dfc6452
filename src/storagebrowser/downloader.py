"""
Downloading remote files to the local filesystem with progress output.
"""

import os
from typing import Optional, TextIO

from storagebrowser.constants import DOWNLOAD_DIR_PERMISSIONS
from storagebrowser.interfaces import LocalFileSystem, StorageClient
from storagebrowser.local_fs import OsFileSystem
from storagebrowser.log_utils import logger
from storagebrowser.nodes import Entry, get_node_size
from storagebrowser.progress import report_progress


class ProgressDownloader:
    """
    Replaces local files with remote ones, printing progress while streaming.

    Every step stops the download at the first error, which is raised
    unchanged. Nothing done by an earlier step is rolled back.
    """

    def __init__(
        self,
        client: StorageClient,
        local_fs: Optional[LocalFileSystem] = None,
        stream: Optional[TextIO] = None,
    ) -> None:
        """
        Parameters:
            client (StorageClient): Performs the byte transfer.
            local_fs (Optional[LocalFileSystem]): Filesystem to prepare the destination on;
                the real one when omitted.
            stream (Optional[TextIO]): Where progress lines go; standard output when omitted.
        """
        self.client = client
        self.local_fs = local_fs if local_fs is not None else OsFileSystem()
        self.stream = stream

    def download_file(self, node: Entry, local_path: str) -> None:
        """
        Download `node` to `local_path`, relative to the current working directory.

        Steps, in order:
        1. Remove the file at `local_path` if it exists.
        2. Create its parent directory if it is missing.
        3. Join the working directory and `local_path` into the absolute destination.
        4. Transfer the node while a reporter prints progress.
        """
        self._remove_outdated_file(local_path)
        self._create_file_directory_if_not_exist(local_path)

        destination = os.path.join(self.local_fs.getcwd(), local_path)
        self._transfer(node, destination)
        logger.info(f"Downloaded {node.name} to {destination}")

    def _remove_outdated_file(self, local_path: str) -> None:
        if not self.local_fs.exists(local_path):
            return
        logger.debug(f"Removing outdated file {local_path}")
        self.local_fs.remove(local_path)

    def _create_file_directory_if_not_exist(self, local_path: str) -> None:
        directory = os.path.dirname(local_path) or os.curdir
        if self.local_fs.exists(directory):
            return
        logger.debug(f"Creating directory {directory}")
        self.local_fs.make_dirs(directory, DOWNLOAD_DIR_PERMISSIONS)

    def _transfer(self, node: Entry, destination: str) -> None:
        total_size = get_node_size(node)
        logger.debug(f"Transferring {node.hash} ({total_size} bytes) to {destination}")
        with report_progress(total_size, self.stream) as channel:
            self.client.transfer(node, destination, channel)
