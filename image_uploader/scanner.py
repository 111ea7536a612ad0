"""
Module for scanning folders for image files.
"""
import logging
import os
from pathlib import Path
from typing import Iterator, Union

from .models import IMAGE_EXTENSIONS, FileCandidate, get_extension, is_image

logger = logging.getLogger(__name__)

__all__ = ["IMAGE_EXTENSIONS", "FileScanner", "classify", "get_extension", "is_image"]


def classify(path: Union[str, Path]) -> FileCandidate:
    """Build a FileCandidate for a path, judged by its extension."""
    return FileCandidate.from_path(path)


class FileScanner:
    """Scans folder trees for image files."""

    def scan_folder(self, folder: Union[str, Path]) -> Iterator[FileCandidate]:
        """Recursively yield image files below a folder.

        A root that is itself a file is treated as a tree of one entry.
        Entries that cannot be read are logged and skipped; a single bad
        entry never stops the scan.

        Args:
            folder: Root of the tree to scan, or a single file

        Yields:
            FileCandidate for each image file found
        """
        if Path(folder).is_file():
            candidate = classify(folder)
            if candidate.is_image:
                yield candidate
            else:
                logger.debug(f"Skipping non-image file {candidate.path}")
            return

        for dirpath, _dirnames, filenames in os.walk(folder, onerror=self._report_error):
            for name in filenames:
                candidate = classify(Path(dirpath) / name)
                if not candidate.is_image:
                    logger.debug(f"Skipping non-image file {candidate.path}")
                    continue
                yield candidate

    @staticmethod
    def _report_error(error: OSError) -> None:
        """Log a traversal error and let the walk continue."""
        logger.warning(f"Failed to read {error.filename}: {error}")
