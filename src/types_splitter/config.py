from pathlib import Path

import yaml
from pydantic import BaseModel, Field, ValidationError

from types_splitter.errors import ConfigurationError

DEFAULT_CONFIG_NAME = "gqlgen_plugins.yml"
CONFIG_SECTION = "types_splitter"


class QuerySplitRule(BaseModel):
    """Root fields whose name matches any of ``matches`` go to the ``prefix`` extension file."""

    prefix: str
    matches: list[str] = Field(default_factory=list)


class TypeSplitRule(BaseModel):
    """The declaration called ``name`` goes to the ``prefix`` file."""

    name: str
    prefix: str


class SplitterConfig(BaseModel):
    queries: list[QuerySplitRule] = Field(default_factory=list)
    types: list[TypeSplitRule] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.queries and not self.types


def find_config(name: str = DEFAULT_CONFIG_NAME, start: Path | None = None) -> Path | None:
    """Return ``name`` if it exists, otherwise the closest ``name`` in ``start`` or one of its parents."""
    path = Path(name)
    if path.is_file():
        return path
    if path.is_absolute():
        return None

    directory = (start or Path.cwd()).resolve()
    for candidate_dir in (directory, *directory.parents):
        candidate = candidate_dir / path
        if candidate.is_file():
            return candidate
    return None


def read_config(text: str) -> SplitterConfig:
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Invalid YAML: {exc}") from exc

    if not isinstance(data, dict) or data.get(CONFIG_SECTION) is None:
        raise ConfigurationError(f"Missing '{CONFIG_SECTION}' section")

    try:
        config = SplitterConfig.model_validate(data[CONFIG_SECTION])
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid '{CONFIG_SECTION}' section: {exc}") from exc

    if config.is_empty:
        raise ConfigurationError(f"No split rules in '{CONFIG_SECTION}' section")
    return config


def load_config(path: str | Path | None = None) -> SplitterConfig:
    """Locate and read the configuration; ``path`` defaults to the lookup of ``DEFAULT_CONFIG_NAME``."""
    resolved = find_config(str(path) if path is not None else DEFAULT_CONFIG_NAME)
    if resolved is None:
        raise ConfigurationError(f"Config file '{path or DEFAULT_CONFIG_NAME}' not found")

    try:
        text = resolved.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigurationError(f"Cannot read config file '{resolved}': {exc}") from exc
    return read_config(text)
