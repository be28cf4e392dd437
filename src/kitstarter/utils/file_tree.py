"""Template tree traversal with an inclusion policy.

The walker decides which files of a copied template are candidates for token
substitution. It never modifies anything.

Inclusion policy, applied to every entry:

- ``node_modules`` and ``.git`` are excluded and never descended into
- hidden entries are excluded unless allow-listed (``.gitignore`` etc.)
- symbolic links are excluded: a link to a directory is never followed and
  a link to a file is never rewritten, since its target may lie outside the
  tree
- files with a known binary extension are reported as ``BINARY``: they are
  still copied by the materializer, just never rewritten

Traversal is eager and uses an explicit stack of pending directories rather
than recursion. Entries are visited in sorted order so results are stable.
"""

import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from kitstarter.errors import TraversalError

EXCLUDED_DIRECTORIES = frozenset({"node_modules", ".git"})

HIDDEN_ALLOW_LIST = frozenset({".env.example", ".eslintrc", ".gitignore", ".npmrc"})

BINARY_EXTENSIONS = (
    ".png", ".jpg", ".jpeg", ".gif", ".ico", ".svg", ".webp",
    ".woff", ".woff2", ".ttf", ".eot", ".otf",
    ".mp4", ".mp3", ".avi", ".mov", ".wmv",
    ".zip", ".tar", ".gz", ".rar", ".7z",
    ".exe", ".dmg", ".pkg", ".deb", ".rpm",
)  # fmt: skip


class EntryKind(Enum):
    """Classification of a visited filesystem entry."""

    DIRECTORY = "directory"
    TEXT = "text"
    BINARY = "binary"
    EXCLUDED = "excluded"


@dataclass(frozen=True)
class FileTreeEntry:
    """One path visited during a traversal."""

    path: Path
    kind: EntryKind


def is_binary_file(path: str | Path) -> bool:
    """Return True when the file name ends with a known binary extension."""
    return str(path).lower().endswith(BINARY_EXTENSIONS)


def is_excluded(name: str) -> bool:
    """Return True when an entry with this name is skipped entirely."""
    if name in EXCLUDED_DIRECTORIES:
        return True
    return name.startswith(".") and name not in HIDDEN_ALLOW_LIST


def walk(root: str | Path) -> list[FileTreeEntry]:
    """Visit every entry under ``root`` and classify it.

    Excluded entries are reported but their contents are not visited.

    Args:
        root: Directory to traverse

    Returns:
        Entries in visit order (depth-first, sorted by name within a directory)

    Raises:
        TraversalError: If ``root`` or any directory below it cannot be listed
    """
    root = Path(root)
    entries: list[FileTreeEntry] = []
    pending: list[Path] = [root]

    while pending:
        directory = pending.pop()
        try:
            with os.scandir(directory) as it:
                children = sorted(it, key=lambda child: child.name)
        except OSError as e:
            raise TraversalError(directory, e) from e

        subdirectories: list[Path] = []
        for child in children:
            path = Path(child.path)

            if is_excluded(child.name):
                entries.append(FileTreeEntry(path, EntryKind.EXCLUDED))
                continue

            try:
                is_link = child.is_symlink()
                is_directory = not is_link and child.is_dir(follow_symlinks=False)
            except OSError as e:
                raise TraversalError(path, e) from e

            if is_link:
                entries.append(FileTreeEntry(path, EntryKind.EXCLUDED))
                continue

            if is_directory:
                entries.append(FileTreeEntry(path, EntryKind.DIRECTORY))
                subdirectories.append(path)
            elif is_binary_file(child.name):
                entries.append(FileTreeEntry(path, EntryKind.BINARY))
            else:
                entries.append(FileTreeEntry(path, EntryKind.TEXT))

        # Reversed so the stack pops them in sorted order
        pending.extend(reversed(subdirectories))

    return entries


def list_files(root: str | Path, *, include_binary: bool = False) -> list[Path]:
    """Return the leaf file paths under ``root`` that pass the inclusion policy.

    Args:
        root: Directory to traverse
        include_binary: Also return files with binary extensions

    Raises:
        TraversalError: If any directory cannot be listed
    """
    wanted = {EntryKind.TEXT, EntryKind.BINARY} if include_binary else {EntryKind.TEXT}
    return [entry.path for entry in walk(root) if entry.kind in wanted]
