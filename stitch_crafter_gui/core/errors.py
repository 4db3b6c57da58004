"""
Errors raised by the pattern pipeline.
Only the CLI and the GUI turn these into exit codes or dialogs.
"""


class StitchError(Exception):
    """Base class for every error raised by the core."""


class ParseError(StitchError, ValueError):
    """A thread catalog row could not be parsed."""

    def __init__(self, message, line_number=None):
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)
        self.line_number = line_number


class EmptyPaletteError(StitchError, ValueError):
    """Nearest-color matching was attempted against zero candidates."""


class InvalidDimensionError(StitchError, ValueError):
    """A resize target, source bitmap or grid has no usable size."""


class UnsupportedFormatError(StitchError, ValueError):
    """The file extension is not one of the supported image formats."""


class NoImageLoadedError(StitchError):
    """The session pipeline was used before an image was opened."""
