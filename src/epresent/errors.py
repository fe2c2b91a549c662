"""Error types raised by the presentation engine.

Missing auxiliary files raise the builtin ``FileNotFoundError``.
"""


class EpresentError(Exception):
    """Base class for presentation errors surfaced to the user."""


class NotFoundError(EpresentError):
    """No code block, heading or command matches the request."""


class InvalidDocumentError(EpresentError):
    """The source is not a recognized structured document."""


class ConfigParseError(EpresentError):
    """A directive or config value could not be parsed.

    Always recovered locally by falling back to the default.
    """
