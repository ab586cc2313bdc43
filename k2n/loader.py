"""
Example and ruleset loading.

Functions for reading example files and ruleset documents from disk into
ordered lists of raw text.
"""

import os
from pathlib import Path

from .errors import LoaderError
from .utils import get_logger, has_allowed_extension

logger = get_logger("loader")


def _read_text(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise LoaderError(path, e) from e


def _walk_files(root: Path):
    """
    Yield every regular file under root in lexical order.

    Raises:
        LoaderError: If root is missing or any directory cannot be listed.
    """
    if not root.exists():
        raise LoaderError(root, "no such file or directory")
    if root.is_file():
        yield root
        return

    def on_error(err: OSError):
        raise LoaderError(err.filename or root, err.strerror or err)

    for dirpath, dirnames, filenames in os.walk(root, onerror=on_error):
        dirnames.sort()
        for filename in sorted(filenames):
            filepath = Path(dirpath) / filename
            if filepath.is_file():
                yield filepath


def load_directory(path, extensions=None) -> list[str]:
    """
    Recursively read all files under a directory.

    Args:
        path: Directory to walk.
        extensions: Optional extension allow-list (case-insensitive).

    Returns:
        File contents in walk order.

    Raises:
        LoaderError: If the directory or one of its files cannot be read.
    """
    root = Path(path)
    contents = []
    for filepath in _walk_files(root):
        if extensions and not has_allowed_extension(filepath, extensions):
            continue
        contents.append(_read_text(filepath))

    logger.debug("Loaded %d file(s) from %s", len(contents), root)
    return contents


def load_files(paths, extensions=None) -> list[str]:
    """
    Read explicit file paths.

    Paths that do not match the extension allow-list are skipped. A read
    failure on any path fails the whole call.

    Args:
        paths: File paths in the order they should appear.
        extensions: Optional extension allow-list.

    Returns:
        File contents in the same order as paths.
    """
    contents = []
    for path in paths:
        if extensions and not has_allowed_extension(path, extensions):
            logger.debug("Skipping %s (extension not in %s)", path, sorted(extensions))
            continue
        contents.append(_read_text(Path(path)))
    return contents


def _ruleset_entry(path: Path) -> str:
    return f"Filename: {path.name}\n{_read_text(path)}"


def load_rulesets(path) -> list[str]:
    """Read every file under a ruleset directory, each prefixed with a Filename header."""
    return [_ruleset_entry(filepath) for filepath in _walk_files(Path(path))]


def load_rulesets_if_exists(path) -> list[str]:
    """
    Like load_rulesets, but a ruleset directory that is not configured
    (empty path) or does not exist yields an empty list.
    """
    if not path or not Path(path).exists():
        return []
    return load_rulesets(path)


def load_ruleset_files(paths) -> list[str]:
    """Read explicit ruleset files with the same Filename header as directory rulesets."""
    return [_ruleset_entry(Path(path)) for path in paths]


def deduplicate(items) -> list[str]:
    """Drop exact duplicates, keeping the first occurrence of each item."""
    seen = set()
    result = []
    for item in items:
        if item not in seen:
            seen.add(item)
            result.append(item)
    return result
