"""Per-file error taxonomy.

Every error here is scoped to a single uploaded file. The pipeline
catches ``DeliverableError`` at the file boundary and records it on the
file's status; nothing aborts a batch.

Some conditions are handled without an exception: a file whose name
matches no rule is classified ``unknown`` and gets a warning status,
malformed data rows are skipped, and an empty or unrecognized sheet
yields empty results.
"""

from typing import Optional


class DeliverableError(Exception):
    """Base class for failures while processing one deliverable file."""

    def __init__(self, message: str, filename: Optional[str] = None):
        self.message = message
        self.filename = filename
        super().__init__(message)


class MissingGroupIdentifier(DeliverableError):
    """A comparison-scoped file has no group id (e.g. ``C1``) in its name."""


class GridReadError(DeliverableError):
    """A workbook or text file that could not be read into a grid."""
