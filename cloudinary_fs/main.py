import argparse
import logging
import sys
from typing import Optional

from pydantic import ValidationError

from .adapter import CloudinaryAdapter
from .client import CloudinaryClient
from .config import Settings, get_settings
from .exceptions import ConfigurationError


def setup_logging(settings: Optional[Settings] = None):
    """Configures logging to the console explicitly."""
    log_level_name = (settings.log_level if settings else "INFO").upper()

    # Get the root logger
    root_logger = logging.getLogger()
    root_logger.setLevel(log_level_name)

    # Clear any existing handlers to prevent duplicate logs on re-runs or implicit configs
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )
    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(formatter)
    root_logger.addHandler(stream_handler)

    # Reducing "noise" from third-party libraries
    logging.getLogger("cloudinary").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)


def create_adapter(settings: Settings, verify: bool = False) -> CloudinaryAdapter:
    """
    Builds a CloudinaryAdapter with its own client.
    With `verify`, the credentials are checked against the Admin API first.
    """
    client = CloudinaryClient(**settings.credentials())
    if verify:
        try:
            client.ping()
            logging.info("Cloudinary credentials verified.")
        except Exception as e:
            logging.error(f"Failed to verify Cloudinary credentials. Error: {e}")
            raise ConfigurationError(f"Cloudinary credentials rejected: {e}") from e
    return CloudinaryAdapter(settings, client=client)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        description="Inspect a Cloudinary media library as a filesystem."
    )
    group = parser.add_mutually_exclusive_group(required=True)
    group.add_argument("--list", metavar="DIR", nargs="?", const="", help="List files under DIR.")
    group.add_argument("--url", metavar="PATH", help="Print the delivery URL of PATH.")
    group.add_argument("--has", metavar="PATH", help="Check whether PATH exists.")
    args = parser.parse_args(argv)

    try:
        settings = get_settings()
    except ValidationError as e:
        setup_logging()
        logging.critical(f"Invalid Cloudinary configuration: {e}")
        return 1

    setup_logging(settings)
    adapter = create_adapter(settings)

    if args.url is not None:
        print(adapter.get_url(args.url))
        return 0

    if args.has is not None:
        result = adapter.has(args.has)
        print("yes" if result else f"no ({result.error.value})")
        return 0 if result else 1

    result = adapter.list_contents(args.list)
    if not result:
        logging.error(f"Listing '{args.list}' failed: {result.error.value} {result.message}")
        return 1
    for entry in result.value:
        print(f"{entry.path}\t{entry.size}\t{entry.mimetype}\t{entry.timestamp}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
