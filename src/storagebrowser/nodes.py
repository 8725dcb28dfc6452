"""
Remote node descriptors and lookups over directory listings.

Every function here is pure: it inspects the listing it is given and keeps
no state between calls.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Dict, Iterable

from storagebrowser.constants import DIRECTORY_NODE_TYPE, FILE_NODE_TYPE
from storagebrowser.exceptions import NodeNotFoundError


class NodeKind(IntEnum):
    """Kind of a remote node. Values match the storage service's type codes."""

    FILE = FILE_NODE_TYPE
    DIRECTORY = DIRECTORY_NODE_TYPE

    @property
    def label(self) -> str:
        """Lower-case name used in error messages ("file" or "directory")."""
        return self.name.lower()


@dataclass(frozen=True)
class Entry:
    """Represents one child of a remote directory, as returned by a listing."""

    name: str
    """The node's name within its parent directory"""

    kind: NodeKind
    """Whether the node is a file or a directory"""

    hash: str
    """Opaque identifier of the node, unique within the remote system"""

    size: int = 0
    """File size in bytes (unused for directories)"""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Entry":
        """
        Build an Entry from a listing payload.

        Parameters:
            data (Dict[str, Any]): Mapping with "name", "type" (0 for files, 1 for directories),
                "hash" and optionally "size" keys.

        Returns:
            Entry: The parsed descriptor.

        Raises:
            KeyError: If a required key is missing.
            ValueError: If "type" is not a known node kind.
        """
        return cls(
            name=str(data["name"]),
            kind=NodeKind(int(data["type"])),
            hash=str(data["hash"]),
            size=int(data.get("size") or 0),
        )

    @property
    def is_file(self) -> bool:
        return self.kind == NodeKind.FILE

    @property
    def is_directory(self) -> bool:
        return self.kind == NodeKind.DIRECTORY


def find_by_name_and_kind(entries: Iterable[Entry], name: str, kind: NodeKind) -> str:
    """
    Return the hash of the first entry matching both `name` and `kind`.

    Entries are scanned in listing order. A file and a directory may share a
    name, so the kind is always part of the match.

    Raises:
        NodeNotFoundError: If no entry matches; the message names the kind and `name`.
    """
    for entry in entries:
        if entry.name == name and entry.kind == kind:
            return entry.hash
    raise NodeNotFoundError(kind.label, name)


def find_file(entries: Iterable[Entry], name: str) -> str:
    return find_by_name_and_kind(entries, name, NodeKind.FILE)


def find_directory(entries: Iterable[Entry], name: str) -> str:
    return find_by_name_and_kind(entries, name, NodeKind.DIRECTORY)


def get_node_size(entry: Entry) -> int:
    """Return the declared size of `entry` in bytes."""
    return entry.size
