"""
Module containing data models for the image uploader.
"""
import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional, Union

IMAGE_EXTENSIONS = frozenset({".jpg", ".jpeg", ".png"})


def get_extension(filename: str) -> str:
    """Return the extension of a file name, including the leading dot.

    The extension starts at the last dot of the base name, so ".png"
    has the extension ".png" and "archive.tar.gz" has ".gz".
    """
    base = os.path.basename(filename)
    dot = base.rfind(".")
    return base[dot:] if dot >= 0 else ""


def is_image(filename: str) -> bool:
    """Check whether a file name has a supported image extension.

    Args:
        filename: File name or path to classify

    Returns:
        True if the lowercased extension is .jpg, .jpeg or .png
    """
    return get_extension(filename).lower() in IMAGE_EXTENSIONS


class AttemptOutcome(Enum):
    """Classification of a single upload attempt."""
    SUCCESS = "success"
    RETRYABLE = "retryable"  # got a response with a rejected status code
    FATAL = "fatal"  # file unreadable or no response at all


@dataclass(frozen=True)
class FileCandidate:
    """Represents a file found during discovery."""
    path: Path
    is_image: bool

    @classmethod
    def from_path(cls, path: Union[str, Path]) -> "FileCandidate":
        """Build a candidate for a path, judged by its extension."""
        path = Path(path)
        return cls(path=path, is_image=is_image(path.name))


@dataclass
class UploadAttempt:
    """Represents the outcome of the last attempt made for a file."""
    file_path: Path
    outcome: AttemptOutcome
    attempts: int = 0
    status_code: Optional[int] = None
    error: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.outcome is AttemptOutcome.SUCCESS
