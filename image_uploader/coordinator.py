"""
Module for coordinating concurrent uploads of a folder of images.
"""
import logging
import threading
import time
from pathlib import Path
from typing import Callable, Optional, Union

import requests

from .models import FileCandidate
from .scanner import FileScanner
from .uploader import ImageUploader

logger = logging.getLogger(__name__)


class CompletionBarrier:
    """Counts outstanding upload units and blocks until none remain."""

    def __init__(self):
        self._pending = 0
        self._condition = threading.Condition()

    @property
    def pending(self) -> int:
        with self._condition:
            return self._pending

    def register(self) -> None:
        """Register a unit before it is started."""
        with self._condition:
            self._pending += 1

    def done(self) -> None:
        """Mark one registered unit as finished."""
        with self._condition:
            if self._pending <= 0:
                raise RuntimeError("done() called more times than register()")
            self._pending -= 1
            if self._pending == 0:
                self._condition.notify_all()

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until every registered unit has finished.

        Args:
            timeout: Optional number of seconds to wait

        Returns:
            True if all units finished, False if the timeout expired first
        """
        with self._condition:
            return self._condition.wait_for(lambda: self._pending == 0, timeout=timeout)


class UploadCoordinator:
    """Uploads every image under a folder, one thread per file."""

    def __init__(self, scanner: Optional[FileScanner] = None,
                 session: Optional[requests.Session] = None,
                 sleep: Callable[[float], None] = time.sleep):
        """Initialize the upload coordinator.

        Args:
            scanner: Scanner used to discover images
            session: Shared HTTP session; a new one is created per run if None
            sleep: Function used by uploaders to wait between attempts
        """
        self.scanner = scanner or FileScanner()
        self.session = session
        self._sleep = sleep

    def _run_unit(self, uploader: ImageUploader, candidate: FileCandidate,
                  endpoint_url: str, barrier: CompletionBarrier) -> None:
        try:
            uploader.upload_file(candidate.path, endpoint_url)
        except Exception:
            logger.exception(f"Unexpected error uploading {candidate.path}")
        finally:
            barrier.done()

    def upload_folder(self, folder: Union[str, Path], endpoint_url: str) -> int:
        """Upload all images below a folder and wait for every upload to end.

        Failures are reported per file and never raised.

        Args:
            folder: Root folder to scan, or a single image file
            endpoint_url: URL receiving the uploads

        Returns:
            Number of uploads dispatched
        """
        session = self.session or requests.Session()
        uploader = ImageUploader(session, sleep=self._sleep)
        barrier = CompletionBarrier()
        dispatched = 0

        try:
            for candidate in self.scanner.scan_folder(folder):
                barrier.register()
                thread = threading.Thread(
                    target=self._run_unit,
                    args=(uploader, candidate, endpoint_url, barrier),
                    name=f"upload-{dispatched + 1}",
                )
                try:
                    thread.start()
                except RuntimeError as e:
                    barrier.done()
                    logger.error(f"Failed to start upload of {candidate.path}: {e}")
                    continue
                dispatched += 1
                logger.debug(f"Dispatched upload of {candidate.path}")
        finally:
            # in-flight units still hold the session, so join before closing it
            barrier.wait()
            if self.session is None:
                session.close()

        logger.debug(f"All {dispatched} uploads from {folder} finished")
        return dispatched
