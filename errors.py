"""errors.py — Exceptions raised by sifron."""


class SifronError(ValueError):
    """Base class for all input and content errors."""


class EmptyInputError(SifronError):
    def __init__(self, message: str = "Book text is empty"):
        super().__init__(message)


class MissingMetadataError(SifronError):
    def __init__(self, missing: list[str]):
        self.missing = missing
        super().__init__(f"Missing required metadata: {', '.join(missing)}")


class InvalidDocumentError(SifronError):
    """Persisted or pasted JSON does not have the book document shape."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Invalid book content format: {reason}")


class ChapterNotFoundError(SifronError):
    def __init__(self, chapter_id: str):
        self.chapter_id = chapter_id
        super().__init__(f"Chapter '{chapter_id}' not found")


class StorageError(SifronError):
    """The key-value store could not be read or written."""
