"""
k2n
===

A command-line tool that builds a prompt from example files and rulesets,
sends it to an AI provider (OpenRouter or Gemini) and writes the generated
configuration to stdout, a file or a directory.
"""

__version__ = "0.3.0"

from .loader import (
    deduplicate,
    load_directory,
    load_files,
    load_ruleset_files,
    load_rulesets,
    load_rulesets_if_exists,
)
from .output import (
    Destination,
    ParsedFileSet,
    classify_destination,
    parse_generated_files,
    save_output,
)

__all__ = [
    "deduplicate",
    "load_directory",
    "load_files",
    "load_ruleset_files",
    "load_rulesets",
    "load_rulesets_if_exists",
    "Destination",
    "ParsedFileSet",
    "classify_destination",
    "parse_generated_files",
    "save_output",
]
