class ExportError(Exception):
    """Base exception for export-level errors."""


class RootNotFoundError(ExportError):
    """Raised when a single-root strategy cannot find its anchor in the vault."""

    def __init__(self, kind: str, identifier: str):
        self.kind = kind
        self.identifier = identifier
        super().__init__(f'{kind.capitalize()} "{identifier}" not found in your vault')


class ExportWriteError(ExportError):
    """Raised when the storage layer rejects the output file."""
