"""
Exceptions raised by the plate layout engine.

Every error records the stage that failed and the inputs that were examined,
so a caller can tell why automatic detection gave up and which explicit hint
to supply instead.
"""


class PlateLayoutError(Exception):
    """Base class for all plate layout errors."""

    def __init__(self, message, stage=None, examined=None):
        super().__init__(message)
        self.message = message
        self.stage = stage
        self.examined = list(examined) if examined else []

    def at_stage(self, stage, examined=None):
        """Attach the failing stage (and extra examined inputs) and return self."""
        self.stage = stage
        if examined:
            self.examined.extend(examined)
        return self

    def __str__(self):
        text = self.message
        if self.stage:
            text = f"[{self.stage}] {text}"
        if self.examined:
            text += f" (examined: {', '.join(str(item) for item in self.examined)})"
        return text


class InvalidPlateSizeError(PlateLayoutError, ValueError):
    """Plate size is not one of the supported well counts."""


class InvalidPositionFormatError(PlateLayoutError, ValueError):
    """Unknown notation name, or a value that does not parse in its notation."""


class UnrecognizedPositionFormatError(PlateLayoutError, ValueError):
    """The detector could not classify a position sample."""


class UnsupportedFileTypeError(PlateLayoutError, ValueError):
    """File extension has no table reader or writer."""


class MissingColumnError(PlateLayoutError, LookupError):
    """An explicitly named column is not present in the table."""


class PositionColumnNotFoundError(PlateLayoutError, LookupError):
    """No position column or row/column pair could be resolved."""


class ValueColumnNotFoundError(PlateLayoutError, LookupError):
    """No value column could be resolved."""


class PositionOutOfBoundsError(PlateLayoutError, ValueError):
    """Row, column or sequential index falls outside the plate geometry."""


class UnknownRowLabelError(PlateLayoutError, ValueError):
    """Row letter is not part of the plate's row labels."""


class InvalidStartPositionError(PlateLayoutError, ValueError):
    """Plate map start position is malformed or outside the plate."""
