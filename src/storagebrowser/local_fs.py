"""
Local filesystem backed by the os module.
"""

import os

from storagebrowser.interfaces import LocalFileSystem


class OsFileSystem(LocalFileSystem):
    """LocalFileSystem that operates on the real filesystem."""

    def exists(self, path: str) -> bool:
        return os.path.exists(path)

    def remove(self, path: str) -> None:
        os.remove(path)

    def make_dirs(self, path: str, mode: int) -> None:
        os.makedirs(path, mode=mode, exist_ok=True)

    def getcwd(self) -> str:
        return os.getcwd()
