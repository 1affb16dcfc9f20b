# prsync Configuration Module
# Handles mapping validation and YAML/JSON configuration loading

from prsync.config.loader import (
    ConfigError,
    build_mappings,
    get_config_path,
    load_config,
    parse_mappings,
    resolve_source_repository,
    validate_config_file,
)
from prsync.config.schema import (
    DEFAULT_API_URL,
    DEFAULT_DEST_BRANCH,
    ExistingBranchStrategy,
    FileMapping,
    PrsyncConfig,
    RepositoryRef,
)

__all__ = [
    # Schema
    "PrsyncConfig",
    "FileMapping",
    "RepositoryRef",
    "ExistingBranchStrategy",
    "DEFAULT_API_URL",
    "DEFAULT_DEST_BRANCH",
    # Loader
    "ConfigError",
    "load_config",
    "get_config_path",
    "parse_mappings",
    "build_mappings",
    "validate_config_file",
    "resolve_source_repository",
]
