# prsync Configuration Loader
# Load mappings from JSON input or YAML/JSON config files

import json
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import ValidationError

from prsync.config.schema import FileMapping, PrsyncConfig, RepositoryRef

DEFAULT_CONFIG_NAME = "prsync.yaml"


class ConfigError(Exception):
    """Exception raised for invalid or missing configuration."""

    def __init__(self, message: str, errors: Optional[list[str]] = None):
        self.message = message
        self.errors = errors or []
        super().__init__(message)

    def __str__(self) -> str:
        if not self.errors:
            return self.message
        details = "\n".join(f"  {error}" for error in self.errors)
        return f"{self.message}\n{details}"


def get_config_path() -> Path:
    """Get the path to the configuration file."""
    # Allow override via environment variable
    env_path = os.environ.get("PRSYNC_CONFIG")
    if env_path:
        return Path(env_path).expanduser()
    return Path.cwd() / DEFAULT_CONFIG_NAME


def format_validation_error(error: ValidationError, prefix: tuple[str, ...] = ()) -> list[str]:
    """
    Flatten a pydantic error into "location: message" lines.

    Args:
        error: Validation error.
        prefix: Location segments to prepend.

    Returns:
        One line per problem.
    """
    lines: list[str] = []
    for item in error.errors():
        loc = " -> ".join(str(part) for part in (*prefix, *item["loc"]))
        lines.append(f"{loc}: {item['msg']}" if loc else item["msg"])
    return lines


def build_mappings(data: Any) -> dict[str, FileMapping]:
    """
    Validate a raw mapping record.

    Args:
        data: Object of mapping name to mapping fields.

    Returns:
        Dict of mapping name to validated FileMapping.

    Raises:
        ConfigError: If the record or any mapping is invalid.
    """
    if not isinstance(data, Mapping):
        raise ConfigError("File mappings must be an object of name to mapping")

    mappings: dict[str, FileMapping] = {}
    errors: list[str] = []

    for name, raw in data.items():
        try:
            mappings[str(name)] = FileMapping.model_validate(raw)
        except ValidationError as e:
            errors.extend(format_validation_error(e, prefix=(str(name),)))

    if errors:
        raise ConfigError("Invalid file mappings", errors)

    return mappings


def parse_mappings(text: str) -> dict[str, FileMapping]:
    """
    Parse mappings from a JSON string.

    Args:
        text: JSON object of mapping name to mapping fields.

    Returns:
        Dict of mapping name to validated FileMapping.

    Raises:
        ConfigError: If the text is not valid JSON or a mapping is invalid.
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ConfigError(f"File mappings are not valid JSON: {e}") from e

    return build_mappings(data)


def load_config(config_path: Optional[Path] = None) -> PrsyncConfig:
    """
    Load configuration from a YAML (or JSON) file.

    Args:
        config_path: Optional path to config file. Uses default if not provided.

    Returns:
        PrsyncConfig: Validated configuration object.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        ConfigError: If config file is invalid.
    """
    if config_path is None:
        config_path = get_config_path()

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    try:
        with open(config_path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML syntax in {config_path}: {e}") from e

    if data is None:
        data = {}

    if not isinstance(data, dict):
        raise ConfigError(f"Configuration root must be a mapping: {config_path}")

    try:
        return PrsyncConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {config_path}", format_validation_error(e)) from e


def validate_config_file(config_path: Optional[Path] = None) -> tuple[bool, list[str]]:
    """
    Validate a configuration file without running a sync.

    Args:
        config_path: Path to config file to validate.

    Returns:
        Tuple of (is_valid, error_messages).
    """
    try:
        config = load_config(config_path)
    except FileNotFoundError as e:
        return False, [str(e)]
    except ConfigError as e:
        return False, [e.message, *e.errors]

    if not config.mappings:
        return False, ["No file mappings defined"]

    return True, []


def resolve_source_repository(
    explicit: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> RepositoryRef:
    """
    Resolve the repository files are read from.

    Uses the explicit value when given, otherwise GITHUB_REPOSITORY as set
    by GitHub Actions. GITHUB_REPOSITORY_OWNER takes precedence for the owner.

    Args:
        explicit: Optional "owner/name" value.
        environ: Environment to read (defaults to os.environ).

    Returns:
        RepositoryRef of the source repository.

    Raises:
        ConfigError: If no usable repository identity is available.
    """
    env = os.environ if environ is None else environ

    if explicit:
        try:
            return RepositoryRef.parse(explicit)
        except ValueError as e:
            raise ConfigError(str(e)) from e

    full_name = env.get("GITHUB_REPOSITORY", "")
    if not full_name:
        raise ConfigError("Source repository unknown: set GITHUB_REPOSITORY or pass --source-repo")

    try:
        ref = RepositoryRef.parse(full_name)
    except ValueError as e:
        raise ConfigError(f"Invalid GITHUB_REPOSITORY: {e}") from e

    owner = env.get("GITHUB_REPOSITORY_OWNER")
    if owner:
        ref = RepositoryRef(owner=owner, name=ref.name)
    return ref
