"""
Command-line interface for the image uploader.
"""
import argparse
import logging
import sys
from typing import List, Optional

from .coordinator import UploadCoordinator

logger = logging.getLogger(__name__)

USAGE = "Usage: image-uploader <folder_path> <endpoint_url>"


def setup_logging(verbose: bool = False) -> None:
    """Configure logging for the application.

    Args:
        verbose: Whether to enable debug logging
    """
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Upload every image below a folder to an HTTP endpoint",
        usage=USAGE,
    )
    parser.add_argument('-v', '--verbose', action='store_true',
                        help="Enable verbose logging")
    parser.add_argument('paths', nargs='*', metavar='ARG',
                        help="<folder_path> <endpoint_url>")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI.

    Exits 0 even when individual uploads fail; failures are only
    visible in the log output.
    """
    args, unknown = build_parser().parse_known_args(argv)
    if unknown or len(args.paths) != 2:
        print(USAGE)
        return 0

    setup_logging(args.verbose)
    folder_path, endpoint_url = args.paths

    coordinator = UploadCoordinator()
    coordinator.upload_folder(folder_path, endpoint_url)
    return 0


if __name__ == '__main__':
    sys.exit(main())
