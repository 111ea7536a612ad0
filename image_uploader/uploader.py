"""
Module for uploading image files over HTTP with retry logic.
"""
import logging
import mimetypes
import time
from pathlib import Path
from typing import BinaryIO, Callable, Union

import requests
from tenacity import (
    Retrying,
    RetryCallState,
    stop_after_attempt,
    wait_fixed,
    retry_if_result,
    before_log,
)

from .models import AttemptOutcome, UploadAttempt

logger = logging.getLogger(__name__)

MAX_ATTEMPTS = 4  # first attempt plus 3 retries
RETRY_DELAY = 10  # seconds between attempts, no backoff
SUCCESS_STATUSES = frozenset({200, 201})
FORM_FIELD = "file"


def is_rejected(response: requests.Response) -> bool:
    """Check if a response should trigger a retry.

    Args:
        response: Response received from the endpoint

    Returns:
        True if the status code is anything but 200 or 201
    """
    return response.status_code not in SUCCESS_STATUSES


def guess_media_type(file_path: Path) -> str:
    media_type, _ = mimetypes.guess_type(file_path.name)
    return media_type or "application/octet-stream"


class ImageUploader:
    """Sends image files to an HTTP endpoint as multipart form uploads."""

    def __init__(self, session: requests.Session,
                 sleep: Callable[[float], None] = time.sleep):
        """Initialize the uploader.

        Args:
            session: Shared HTTP session; only used to issue requests
            sleep: Function used to wait between attempts
        """
        self.session = session
        self._sleep = sleep

    def _retrying(self) -> Retrying:
        return Retrying(
            retry=retry_if_result(is_rejected),
            stop=stop_after_attempt(MAX_ATTEMPTS),
            wait=wait_fixed(RETRY_DELAY),
            sleep=self._sleep,
            before=before_log(logger, logging.DEBUG),
            after=self._log_rejected,
            retry_error_callback=lambda state: state.outcome.result(),
        )

    @staticmethod
    def _log_rejected(retry_state: RetryCallState) -> None:
        file_path = retry_state.args[0].name
        response = retry_state.outcome.result()
        suffix = " Retrying..." if retry_state.attempt_number < MAX_ATTEMPTS else ""
        logger.warning(
            f"Failed to send image {file_path}, received status code "
            f"{response.status_code} (attempt {retry_state.attempt_number}/{MAX_ATTEMPTS}).{suffix}"
        )

    def _post(self, handle: BinaryIO, endpoint_url: str) -> requests.Response:
        """Send one attempt, rewinding the file so every attempt carries all of it."""
        handle.seek(0)
        file_path = Path(handle.name)
        return self.session.post(
            endpoint_url,
            files={FORM_FIELD: (file_path.name, handle, guess_media_type(file_path))},
            headers={"Accept": "application/json"},
        )

    def upload_file(self, file_path: Union[str, Path], endpoint_url: str) -> UploadAttempt:
        """Upload a single file, retrying rejected attempts.

        A file that cannot be opened and a request that gets no response
        at all are both fatal and never retried. A response with a status
        other than 200/201 is retried up to MAX_ATTEMPTS in total.

        Args:
            file_path: Path to the image to upload
            endpoint_url: URL receiving the multipart POST

        Returns:
            UploadAttempt describing the final attempt
        """
        file_path = Path(file_path)
        try:
            handle = open(file_path, "rb")
        except OSError as e:
            logger.error(f"Failed to open file {file_path}: {e}")
            return UploadAttempt(file_path=file_path, outcome=AttemptOutcome.FATAL,
                                 error=str(e))

        retrying = self._retrying()
        with handle:
            try:
                response = retrying(self._post, handle, endpoint_url)
            except requests.RequestException as e:
                logger.error(f"Failed to send image {file_path}: {e}")
                return UploadAttempt(file_path=file_path, outcome=AttemptOutcome.FATAL,
                                     attempts=self._attempts(retrying), error=str(e))
            except OSError as e:
                logger.error(f"Failed to read file {file_path}: {e}")
                return UploadAttempt(file_path=file_path, outcome=AttemptOutcome.FATAL,
                                     attempts=self._attempts(retrying), error=str(e))

        attempts = self._attempts(retrying)
        if is_rejected(response):
            logger.error(f"Failed to send image {file_path} after multiple retries")
            return UploadAttempt(file_path=file_path, outcome=AttemptOutcome.RETRYABLE,
                                 attempts=attempts, status_code=response.status_code)

        logger.info(f"Successfully sent: {file_path}")
        return UploadAttempt(file_path=file_path, outcome=AttemptOutcome.SUCCESS,
                             attempts=attempts, status_code=response.status_code)

    @staticmethod
    def _attempts(retrying: Retrying) -> int:
        return retrying.statistics.get("attempt_number", 0)
