from .coordinator import CompletionBarrier, UploadCoordinator
from .models import AttemptOutcome, FileCandidate, UploadAttempt
from .scanner import FileScanner, is_image
from .uploader import ImageUploader

__version__ = "0.1.0"

__all__ = [
    "CompletionBarrier",
    "UploadCoordinator",
    "AttemptOutcome",
    "FileCandidate",
    "UploadAttempt",
    "FileScanner",
    "is_image",
    "ImageUploader",
]
