"""
Exception types for k2n.

Every error the CLI reports to the user derives from K2NError, so the
subcommand handlers can catch one type at their boundary.
"""


class K2NError(Exception):
    """Base class for all k2n errors."""


class ConfigError(K2NError):
    """Missing API key, unknown provider kind or other bad settings."""


class LoaderError(K2NError):
    """An example or ruleset file/directory could not be read."""

    def __init__(self, path, reason):
        self.path = str(path)
        self.reason = reason
        super().__init__(f"failed to read {self.path}: {reason}")


class ProviderError(K2NError):
    """The AI provider call failed or returned an unusable response."""


class ProviderTimeoutError(ProviderError):
    """The AI provider did not answer before the deadline."""


class OutputError(K2NError):
    """Generated output could not be written."""

    def __init__(self, path, reason):
        self.path = str(path)
        self.reason = reason
        super().__init__(f"failed to write {self.path}: {reason}")
