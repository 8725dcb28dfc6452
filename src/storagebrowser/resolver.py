"""
Path resolution against the remote node tree.
"""

import os
from typing import Callable, List

from storagebrowser.constants import DEFAULT_PATH_SEPARATOR
from storagebrowser.exceptions import (
    ConfigValidationError,
    EmptyPathError,
    ObjectNodeNotFoundError,
)
from storagebrowser.log_utils import logger
from storagebrowser.nodes import Entry, find_directory, find_file

ListChildren = Callable[[str], List[Entry]]


class PathResolver:
    """
    Walks a path one component at a time, starting from a root hash.

    Every component but the last must be a directory; the last one must be a
    file. Only the listing of the directory currently being visited is held.
    """

    def __init__(self, separator: str = DEFAULT_PATH_SEPARATOR) -> None:
        if not separator:
            raise ConfigValidationError("Path separator must not be empty")
        self.separator = separator

    def split(self, path: str) -> List[str]:
        """
        Split `path` into its components.

        Platform separators are first replaced by the resolver's separator.
        Surrounding whitespace and leading or trailing separators are dropped, so
        "/a/b" and "a/b" name the same node. Inner empty components are kept.

        Raises:
            EmptyPathError: If nothing is left to resolve.
        """
        normalized = path.strip()
        for platform_sep in (os.sep, os.altsep):
            if platform_sep and platform_sep != self.separator:
                normalized = normalized.replace(platform_sep, self.separator)
        normalized = normalized.strip(self.separator)
        if not normalized:
            raise EmptyPathError()
        return normalized.split(self.separator)

    def resolve(self, path: str, root_hash: str, list_children: ListChildren) -> str:
        """
        Return the hash of the file at `path` below the directory `root_hash`.

        Parameters:
            path (str): Path of the file relative to the root directory.
            root_hash (str): Hash of the directory the walk starts from.
            list_children (Callable[[str], List[Entry]]): Returns the children of a node hash.
                Its errors are propagated unchanged and stop the walk.

        Returns:
            str: Hash of the file node.

        Raises:
            EmptyPathError: If `path` has no components; no listing is requested.
            NodeNotFoundError: If a directory or the final file is missing.
        """
        components = self.split(path)
        *directories, file_name = components

        current = root_hash
        for index, component in enumerate(components):
            children = list_children(current)
            if index == len(directories):
                node_hash = find_file(children, file_name)
                logger.debug(f"Resolved {path} to node {node_hash}")
                return node_hash
            current = find_directory(children, component)
            logger.debug(f"Descended into {component} ({current})")

        raise ObjectNodeNotFoundError(path)
