"""Command-line interface for reading dataverses and datasets."""

import argparse
import json
import logging
import sys
from pathlib import Path

from dataverse_client import VERSION_LATEST
from dataverse_client.config import Config, get_config
from dataverse_client.datasets import (
    get_dataset,
    get_dataset_files,
    get_dataset_metadata,
    get_datasets,
    get_metadata_field,
)
from dataverse_client.dataverses import get_child_dataverses, get_dataverse
from dataverse_client.errors import DataverseError, RequestError
from dataverse_client.logging_config import setup_logging
from dataverse_client.validation import validate_alias

# Exit codes
EXIT_INVALID = 1
EXIT_REQUEST_FAILED = 2


def resolve_dataverse(target: str, config: Config) -> str:
    """Turn a dataverse alias into a URI; full URIs pass through.

    Raises:
        ValueError: If the target is neither a URI nor a valid alias
    """
    if target.startswith(("https://", "http://")):
        return target
    if not validate_alias(target):
        raise ValueError(f"Invalid dataverse alias: {target}")
    return config.dataverse_uri(target)


def resolve_dataset(target: str, config: Config) -> str:
    """Turn a numeric dataset id into a URI; full URIs pass through.

    Raises:
        ValueError: If the target is neither a URI nor a numeric id
    """
    if target.startswith(("https://", "http://")):
        return target
    if not target.isdigit():
        raise ValueError(f"Invalid dataset id: {target}")
    return config.dataset_uri(target)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dataverse-client",
        description="Read dataverses, datasets and their metadata from a Dataverse installation."
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to YAML configuration file (optional, defaults to .dataverse-client.yaml)"
    )
    parser.add_argument(
        "--token",
        default=None,
        help="API token (default: api.token from config or DATAVERSE_API_TOKEN)"
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level (default: WARNING)"
    )
    parser.add_argument(
        "--log-file",
        default=None,
        help="Optional log file path (logs to stderr if not specified)"
    )

    commands = parser.add_subparsers(dest="command", required=True)

    get_cmd = commands.add_parser("get", help="Show a dataverse")
    get_cmd.add_argument("target", help="Dataverse alias or URI")

    children_cmd = commands.add_parser("children", help="List child dataverses")
    children_cmd.add_argument("target", help="Dataverse alias or URI")
    children_cmd.add_argument("--recurse", action="store_true", help="Include all descendants")

    datasets_cmd = commands.add_parser("datasets", help="List datasets of a dataverse")
    datasets_cmd.add_argument("target", help="Dataverse alias or URI")
    datasets_cmd.add_argument("--recurse", action="store_true", help="Include datasets of descendants")

    dataset_cmd = commands.add_parser("dataset", help="Show a dataset")
    dataset_cmd.add_argument("target", help="Dataset id or URI")

    files_cmd = commands.add_parser("files", help="List files of a dataset version")
    files_cmd.add_argument("target", help="Dataset id or URI")
    files_cmd.add_argument("--version", default=VERSION_LATEST, help="Dataset version (default: :latest)")

    metadata_cmd = commands.add_parser("metadata", help="Show metadata of a dataset version")
    metadata_cmd.add_argument("target", help="Dataset id or URI")
    metadata_cmd.add_argument("--version", default=VERSION_LATEST, help="Dataset version (default: :latest)")
    metadata_cmd.add_argument("--block", default=None, help="Metadata block name, e.g. citation")
    metadata_cmd.add_argument("--field", default=None, help="Single field of --block to show")

    return parser


def run_command(args: argparse.Namespace, config: Config, token: str):
    """Execute the selected command and return a JSON-serializable result."""
    if args.command == "get":
        return get_dataverse(resolve_dataverse(args.target, config), token)
    if args.command == "children":
        return list(get_child_dataverses(resolve_dataverse(args.target, config), token, recurse=args.recurse))
    if args.command == "datasets":
        return list(get_datasets(resolve_dataverse(args.target, config), token, recurse=args.recurse))
    if args.command == "dataset":
        return get_dataset(resolve_dataset(args.target, config), token)
    if args.command == "files":
        return get_dataset_files(resolve_dataset(args.target, config), args.version, token)
    if args.command == "metadata":
        metadata = get_dataset_metadata(resolve_dataset(args.target, config), args.version, args.block, token)
        if args.field:
            return get_metadata_field(metadata, args.field)
        return metadata
    raise ValueError(f"Unknown command: {args.command}")


def main(argv: list[str] | None = None):
    """Run the dataverse-client command line."""
    parser = build_parser()
    args = parser.parse_args(argv)

    # Setup logging
    log_file = Path(args.log_file) if args.log_file else None
    setup_logging(level=args.log_level, log_file=log_file)
    logger = logging.getLogger("dataverse_client.cli")

    # Load configuration (if specified via --config, or from default locations)
    config_file = Path(args.config) if args.config else None
    config = get_config(config_file)
    logger.debug(f"Using API at {config.api_base_url} (timeout: {config.api_timeout}s)")

    if args.command == "metadata" and args.field and not args.block:
        parser.error("--field requires --block")

    token = args.token or config.api_token
    if not token:
        logger.error("No API token: use --token, api.token in the config file, or DATAVERSE_API_TOKEN")
        sys.exit(EXIT_INVALID)

    try:
        result = run_command(args, config, token)
    except RequestError as e:
        logger.error(f"Request failed: {e}")
        sys.exit(EXIT_REQUEST_FAILED)
    except (DataverseError, ValueError) as e:
        logger.error(str(e))
        sys.exit(EXIT_INVALID)

    print(json.dumps(result, indent=config.json_indent, ensure_ascii=False))


if __name__ == "__main__":
    main()
