"""Generator configuration.

Settings live in a JSON file (gql-tsgen.conf.json by default). When no file
is given and the default one does not exist, built-in defaults are used.
"""

import logging
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "gql-tsgen.conf.json"
DEFAULT_HEADER = "// Code generated by gql-tsgen. DO NOT EDIT."


class ConfigError(Exception):
    """Raised when the configuration file is missing or invalid."""


class OutputFilenames(BaseModel):
    model_config = ConfigDict(extra="forbid")

    types: str = "gpl.d.ts"
    main: str = "gpl.ts"
    queries: str = "queries.ts"
    resources: str = "resources.ts"
    index: str = "index.ts"


class OutputOptions(BaseModel):
    model_config = ConfigDict(extra="forbid")

    path: str = "output/gpl"
    filenames: OutputFilenames = Field(default_factory=OutputFilenames)


class GeneratorConfig(BaseModel):
    """Everything the generator can be told from the config file or CLI."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    schema_path: str = Field("schema.json", alias="schema")
    output: OutputOptions = Field(default_factory=OutputOptions)
    language: Literal["typescript"] = "typescript"
    template_dir: str | None = None
    transport_module: str = "./client"
    hook_library: str = "@tanstack/react-query"
    required_check: Literal["truthy", "presence"] = "truthy"
    header: str | None = DEFAULT_HEADER
    exclude_prefix: str | None = None
    include_prefix: str | None = None
    # Root fields left out of the generated client
    skip_operations: list[str] = Field(default_factory=list)
    # Sent with the introspection request when schema is a URL
    headers: dict[str, str] = Field(default_factory=dict)


def load_config(config_path: str | Path | None = None) -> GeneratorConfig:
    """Load and validate the configuration file."""
    if config_path is None:
        path = Path(DEFAULT_CONFIG_FILE)
        if not path.exists():
            logger.debug("No %s found, using defaults", DEFAULT_CONFIG_FILE)
            return GeneratorConfig()
    else:
        path = Path(config_path)
        if not path.exists():
            raise ConfigError(f"Configuration file not found: {path}")

    text = path.read_text(encoding="utf-8")
    if not text.strip():
        raise ConfigError(f"Configuration file is empty: {path}")
    try:
        config = GeneratorConfig.model_validate_json(text)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration in {path}: {e}") from e
    logger.debug("Loaded configuration from %s", path)
    return config


def write_default_config(path: str | Path) -> Path:
    """Write a config file holding every default value."""
    path = Path(path)
    path.write_text(GeneratorConfig().model_dump_json(by_alias=True, indent=2) + "\n", encoding="utf-8")
    return path
