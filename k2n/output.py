"""
Output routing for generated content.

Decides whether generated text goes to stdout, a single file or a
directory of files split on `---` lines, and writes it there.
"""

import os
import re
import sys
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from tqdm import tqdm

from .errors import OutputError
from .utils import console, get_logger, print_warning

logger = get_logger("output")

# A line containing only the three-dash delimiter
_DELIMITER_RE = re.compile(r'^---\r?$', re.MULTILINE)
_UNSAFE_CHARS_RE = re.compile(r'[^A-Za-z0-9._-]+')


class Destination(Enum):
    STDOUT = "stdout"
    EXISTING_DIR = "existing_dir"
    EXISTING_FILE = "existing_file"
    NEW_PATH = "new_path"


@dataclass(frozen=True)
class FileSystem:
    """The filesystem probes destination classification depends on."""
    is_dir: Callable[[str], bool] = os.path.isdir
    exists: Callable[[str], bool] = os.path.exists


LOCAL_FS = FileSystem()


def classify_destination(destination: str, fs: FileSystem = LOCAL_FS) -> Destination:
    """
    Classify a --destination value.

    Args:
        destination: Empty for stdout, otherwise a file or directory path.
        fs: Filesystem probes (swap in fakes for tests).

    Returns:
        The Destination kind.
    """
    if not destination:
        return Destination.STDOUT
    if fs.is_dir(destination):
        return Destination.EXISTING_DIR
    if fs.exists(destination):
        return Destination.EXISTING_FILE
    return Destination.NEW_PATH


def looks_like_directory(destination: str) -> bool:
    """True if the path ends with a path separator."""
    return destination.endswith(("/", os.sep))


@dataclass
class ParsedFileSet:
    """Generated files keyed by sanitized relative path."""
    files: dict[str, str] = field(default_factory=dict)
    # Segments that had no body line and were not turned into files
    dropped: list[str] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.files)


def sanitize_filename(name: str) -> str:
    """
    Make a generated file name safe to join under the destination directory.

    Each path component has runs of characters other than letters, digits,
    '.', '_' and '-' collapsed to one underscore, and leading underscores
    trimmed. Empty, '.' and '..' components are removed.

    Returns:
        The relative path using '/' separators; empty if nothing usable remains.
    """
    components = []
    for part in name.replace("\\", "/").split("/"):
        part = _UNSAFE_CHARS_RE.sub("_", part.strip()).lstrip("_")
        if part in ("", ".", ".."):
            continue
        components.append(part)
    return "/".join(components)


def parse_generated_files(content: str) -> ParsedFileSet:
    """
    Split generated output into named files.

    Segments are separated by lines that contain only `---`. The first line
    of a segment names the file and the rest is its content. Segments with
    no content line are recorded in `dropped` instead of becoming files.

    Args:
        content: Generated output.

    Returns:
        ParsedFileSet in segment order. A repeated name keeps the last body.
    """
    parsed = ParsedFileSet()

    for segment in _DELIMITER_RE.split(content):
        lines = segment.strip().split("\n", 1)
        if len(lines) < 2:
            if lines[0].strip():
                parsed.dropped.append(lines[0].strip())
            continue

        filename = sanitize_filename(lines[0].strip())
        if not filename:
            parsed.dropped.append(segment.strip())
            continue
        parsed.files[filename] = lines[1].strip()

    return parsed


def _write_text(path: Path, content: str) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    except OSError as e:
        raise OutputError(path, e.strerror or e) from e


def write_single_file(path, content: str) -> Path:
    """Write content unchanged to one file, creating parent directories."""
    path = Path(path)
    _write_text(path, content)
    console.print(f"[green]Result written to[/green] {path}")
    return path


def write_files(directory, parsed: ParsedFileSet) -> list[Path]:
    """
    Write each parsed file under a directory.

    Stops at the first failure. Files already written stay in place.

    Raises:
        OutputError: Naming the path that could not be written.
    """
    directory = Path(directory)
    written = []

    for segment in parsed.dropped:
        preview = segment if len(segment) <= 40 else segment[:37] + "..."
        print_warning(f"Skipped generated segment without content: {preview!r}")

    for filename, body in tqdm(parsed.files.items(), total=len(parsed), unit="file", leave=False, disable=None):
        path = directory / filename
        _write_text(path, body)
        tqdm.write(f"Written {filename} -> {path}", file=sys.stderr)
        written.append(path)

    return written


def echo_files(parsed: ParsedFileSet) -> None:
    """Print each parsed file to stdout under a name header."""
    for filename, body in parsed.files.items():
        print(f"==> {filename} <==")
        print(body)
        print()


def save_output(
    destination: str,
    content: str,
    echo: bool = False,
    fs: FileSystem = LOCAL_FS,
) -> list[Path]:
    """
    Route generated content to its destination.

    - empty destination: print to stdout
    - existing directory: split into files and write them under it
    - new path ending in a separator, or content with several files: create
      the directory, then as above
    - anything else: write the raw content as one file

    Args:
        destination: --destination value.
        content: Generated output.
        echo: With a stdout destination, print parsed files with name headers
            instead of the raw content.
        fs: Filesystem probes used for classification.

    Returns:
        Paths written (empty for stdout).

    Raises:
        OutputError: If a directory or file cannot be written.
    """
    kind = classify_destination(destination, fs)
    logger.debug("Destination %r classified as %s", destination, kind.value)

    if kind is Destination.STDOUT:
        if echo:
            echo_files(parse_generated_files(content))
        else:
            print(content)
        return []

    if kind is Destination.EXISTING_DIR:
        return write_files(destination, parse_generated_files(content))

    if kind is Destination.NEW_PATH:
        parsed = parse_generated_files(content)
        if looks_like_directory(destination) or len(parsed) > 1:
            try:
                Path(destination).mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise OutputError(destination, e.strerror or e) from e
            return write_files(destination, parsed)

    return [write_single_file(destination, content)]
