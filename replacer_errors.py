"""
Exceptions raised by the replacement engines
"""

from typing import Optional


class WordAutomationError(Exception):
    """Base exception for engine errors (Word could not start, session closed, ...)"""

    def __init__(self, message: str, file_path: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.file_path = file_path

    def __str__(self):
        if self.file_path:
            return f"{self.message} ({self.file_path})"
        return self.message


class WordCrashedError(WordAutomationError):
    """Word stopped responding or its process went away. The session must be restarted."""
    pass


class DocumentError(WordAutomationError):
    """A single document could not be processed (locked, protected, unsupported, ...)"""
    pass
