"""Command Line Interface for perfect-validator.

This module provides a CLI for checking serialized models, validating data
against them and managing stored model versions.

The CLI supports the following commands:
    - check: Structurally validate a serialized model
    - validate: Validate data against a serialized model
    - store: Store a serialized model as a new version
    - versions: List the stored versions of a model
    - show: Print a stored model version

JSON input can be provided either as a direct string or as a file path prefixed with '@'.

Example Usage:
    python -m perfect_validator cli check @models/user.json
    python -m perfect_validator cli validate @models/user.json '{"user": {"name": "Ann"}}'
    perfect-validator --storage-dir data store user @models/user.json
    perfect-validator --backend sqlite --storage-dir data versions user
"""

import argparse
import asyncio
import json
import logging
import os
import sys
from typing import Any, List, Optional

from .core.exceptions import ModelNotFoundError, ModelValidationError, PerfectValidatorError
from .core.models import ValidatorConfig
from .infrastructure.storage import ModelStoragePlugin, create_storage
from .validator import PerfectValidator

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def read_input(value: str) -> str:
    """Return the text of an argument that is either literal or '@path'.

    Args:
        value (str): Literal text, or a file path prefixed with '@'. Relative
            paths are resolved against the current working directory.

    Returns:
        str: The literal text or the file contents.

    Raises:
        ValueError: If the referenced file does not exist.
    """
    if not value.startswith("@"):
        return value

    file_path = value[1:]
    if not os.path.isabs(file_path):
        file_path = os.path.join(os.getcwd(), file_path)
    if not os.path.exists(file_path):
        raise ValueError(f"File not found: {file_path}")

    with open(file_path, "r") as f:
        return f.read()


def parse_json_input(value: str) -> Any:
    """Parse JSON input from either a string or file.

    Args:
        value (str): Either a JSON string or a file path prefixed with '@'.

    Returns:
        Any: Parsed JSON data.

    Raises:
        ValueError: If the JSON is invalid or the specified file is not found.
    """
    try:
        return json.loads(read_input(value))
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON input: {e}") from e


def print_json(data: Any) -> None:
    print(json.dumps(data, indent=2))


def create_parser() -> argparse.ArgumentParser:
    """Create and configure the command-line argument parser.

    Returns:
        argparse.ArgumentParser: Configured argument parser instance.
    """
    parser = argparse.ArgumentParser(prog="perfect-validator", description="Model-driven data validation")
    parser.add_argument("--storage-dir", default="data", help="Directory for stored models (default: data)")
    parser.add_argument("--backend", choices=["json", "sqlite"], default="json", help="Storage backend")
    parser.add_argument(
        "--allow-unknown-fields",
        action="store_true",
        help="Do not report top-level data keys that the model does not declare",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: WARNING)",
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    check = subparsers.add_parser("check", help="Structurally validate a serialized model")
    check.add_argument("model", help="Serialized model as JSON string or @filename")

    validate = subparsers.add_parser("validate", help="Validate data against a serialized model")
    validate.add_argument("model", help="Serialized model as JSON string or @filename")
    validate.add_argument("data", help="Data as JSON string or @filename")

    store = subparsers.add_parser("store", help="Store a serialized model as a new version")
    store.add_argument("name", help="Model name")
    store.add_argument("model", help="Serialized model as JSON string or @filename")
    store.add_argument("--version", type=int, help="Version number (default: latest + 1)")

    versions = subparsers.add_parser("versions", help="List the stored versions of a model")
    versions.add_argument("name", help="Model name")

    show = subparsers.add_parser("show", help="Print a stored model version")
    show.add_argument("name", help="Model name")
    show.add_argument("--version", type=int, help="Version number (default: latest)")

    return parser


def check_model(validator: PerfectValidator, model_text: str) -> int:
    """Deserialize a model and report its structural errors."""
    try:
        validator.deserialize_model(model_text)
    except ModelValidationError as e:
        print_json({"isValid": False, "errors": e.errors})
        return 1
    print_json({"isValid": True, "errors": None})
    return 0


def validate_data(validator: PerfectValidator, model_text: str, data: Any) -> int:
    """Validate data against a serialized model and print the result."""
    model = validator.deserialize_model(model_text)
    result = validator.validate_static(data, model)
    print_json(result.to_dict())
    return 0 if result.is_valid else 1


async def store_model(validator: PerfectValidator, name: str, model_text: str, version: Optional[int]) -> int:
    """Store a serialized model and print the outcome."""
    model = validator.deserialize_model(model_text)
    result = await validator.store_model(name, model, version)
    print_json(result.to_dict())
    return 0 if result.is_valid else 1


async def show_model(storage: ModelStoragePlugin, name: str, version: Optional[int]) -> int:
    """Print a stored model version with its metadata."""
    if version is None:
        found = await storage.get_latest_version(name)
    else:
        found = await storage.get_version(name, version)
    if found is None:
        suffix = "" if version is None else f" version {version}"
        raise ModelNotFoundError(f"Model {name}{suffix} not found")

    print_json(
        {
            "name": found.name,
            "version": found.version,
            "createdAt": found.created_at.isoformat(),
            "model": json.loads(found.model),
        }
    )
    return 0


async def run_command(args: argparse.Namespace) -> int:
    """Execute a parsed command.

    Returns:
        int: Exit status.
    """
    config = ValidatorConfig(allow_unknown_fields=args.allow_unknown_fields)

    if args.command == "check":
        return check_model(PerfectValidator(config=config), read_input(args.model))
    if args.command == "validate":
        return validate_data(PerfectValidator(config=config), read_input(args.model), parse_json_input(args.data))

    storage = create_storage(args.backend, args.storage_dir)
    await storage.initialize()
    try:
        validator = PerfectValidator(storage=storage, config=config)
        if args.command == "store":
            return await store_model(validator, args.name, read_input(args.model), args.version)
        if args.command == "versions":
            print_json(await validator.list_model_versions(args.name))
            return 0
        if args.command == "show":
            return await show_model(storage, args.name, args.version)
        raise ValueError(f"Unknown command: {args.command}")
    finally:
        # Ensure proper cleanup of storage resources
        await storage.cleanup()


async def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI application.

    Args:
        argv: Arguments to parse; ``sys.argv[1:]`` when None.

    Returns:
        int: Exit status, 0 on success and 1 on validation failure or error.
    """
    parser = create_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level), format=LOG_FORMAT)

    if not args.command:
        parser.print_help()
        return 1

    try:
        return await run_command(args)
    except (PerfectValidatorError, ValueError) as e:
        logger.debug(f"Command {args.command} failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1


def run() -> None:
    """Console script entry point."""
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    run()
