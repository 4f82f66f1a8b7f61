"""Nodes of the simulated file tree and path resolution over them."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from honeybear.messages import Command, OutputMsg

Handler = Callable[["Node", list], Optional[Command]]


class FilesystemError(Exception):
    """A lookup, read or run in the simulated file tree failed."""


@dataclass(eq=False)
class Node:
    name: str
    path: str
    directory: bool = False
    children: list = field(default_factory=list)
    asset_name: str = ""
    content: Optional[Callable[[], bytes]] = None
    handler: Optional[Handler] = None
    owner: str = ""
    group: str = ""
    mode: int = 0
    help_text: str = ""

    def is_directory(self) -> bool:
        return self.directory

    def is_file(self) -> bool:
        return not self.directory

    def is_executable(self, user: str, group: str) -> bool:
        """True for a runnable file whose mode grants execute to this user or group."""
        if not self.is_file() or self.handler is None:
            return False
        if user == self.owner and self.mode & 0o100:
            return True
        if group == self.group and self.mode & 0o010:
            return True
        return bool(self.mode & 0o001)

    def is_readable(self, user: str, group: str) -> bool:
        if user == self.owner and self.mode & 0o400:
            return True
        if group == self.group and self.mode & 0o040:
            return True
        return bool(self.mode & 0o004)

    def child(self, name: str) -> Optional[Node]:
        if self.is_file() or not self.children:
            return None
        return next((child for child in self.children if child.name == name), None)

    def open(self) -> bytes:
        """Return the file's contents."""
        if self.is_file() and self.content is not None:
            return self.content()
        raise FilesystemError("not a file")

    def run(self, current_dir: Node, params: list) -> Optional[Command]:
        """Run the node, or show its help text when asked with -h or --help."""
        if "-h" in params or "--help" in params:
            if not self.help_text:
                raise FilesystemError("no help text")
            text = self.help_text
            return lambda: OutputMsg(text)
        if self.handler is not None:
            return self.handler(current_dir, params)
        raise FilesystemError("not executable")


@dataclass
class Filesystem:
    """A file tree with a root, a search path for commands and a home directory."""

    root: Optional[Node] = None
    system_path: list = field(default_factory=lambda: ["/usr/bin/"])
    home: Optional[Node] = None
    embedded_dir: Optional[Path] = None

    def get_node_by_path(self, current_node: Optional[Node], path: str, depth: int = 0) -> Node:
        """Resolve ``path`` relative to ``current_node``.

        A bare name at the top level is looked up in the current directory and
        then along the search path.
        """
        if current_node is None:
            raise FilesystemError("000x00")

        if path in ("", "."):
            return current_node
        if path.startswith(".."):
            parent = self.parent(current_node) or current_node
            if len(path) > 2:
                return self.get_node_by_path(parent, path[3:], depth + 1)
            return parent
        if path.startswith("/"):
            return self.get_node_by_path(self.root, path[1:], depth + 1)
        if path.startswith("./"):
            return self.get_node_by_path(current_node, path[2:], depth + 1)
        if "/" not in path and depth == 0:
            found = current_node.child(path)
            if found is not None:
                return found
            for prefix in self.system_path:
                try:
                    return self.get_node_by_path(current_node, prefix + path, depth + 1)
                except FilesystemError:
                    continue
            raise FilesystemError("not found")

        first, _, rest = path.partition("/")
        found = current_node.child(first)
        if found is None:
            raise FilesystemError("not found")
        if "/" in path:
            return self.get_node_by_path(found, rest, depth + 1)
        return found

    def parent(self, node: Node) -> Optional[Node]:
        parts = node.path.split("/")
        if len(parts) < 2:
            return None
        if len(parts) == 2:
            return self.root
        try:
            return self.get_node_by_path(node, "/".join(parts[:-1]))
        except FilesystemError:
            return None

    def get_content(self, current_node: Node, path: str, user: str, group: str) -> bytes:
        """Read a file the user may read."""
        try:
            node = self.get_node_by_path(current_node, path)
        except FilesystemError:
            raise FilesystemError("not found") from None
        if not node.is_readable(user, group):
            raise FilesystemError("not readable")
        return node.content() if node.content is not None else b""

    def run_node(self, current_node: Node, path: str, params: list, user: str, group: str) -> Optional[Command]:
        """Find and run a command the user may execute."""
        try:
            found = self.get_node_by_path(current_node, path)
        except FilesystemError:
            raise FilesystemError(f"\n{path}: command not found\n") from None
        if not found.is_executable(user, group):
            raise FilesystemError("not executable")
        return found.run(current_node, params)