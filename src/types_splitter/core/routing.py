"""Map root field names and declaration names to destination prefixes."""

import re
from dataclasses import dataclass

from types_splitter.config import SplitterConfig
from types_splitter.errors import ConfigurationError


@dataclass(frozen=True)
class FieldRoute:
    prefix: str
    patterns: tuple[re.Pattern[str], ...]

    def matches(self, name: str) -> bool:
        return any(pattern.search(name) for pattern in self.patterns)


class RoutingTable:
    """Ordered routing rules. The first matching field group and the first listed type name win."""

    def __init__(self, field_routes: list[FieldRoute], type_routes: dict[str, str]) -> None:
        self.field_routes = field_routes
        self.type_routes = type_routes

    @classmethod
    def from_config(cls, config: SplitterConfig) -> "RoutingTable":
        if config.is_empty:
            raise ConfigurationError("No split rules configured")

        field_routes: list[FieldRoute] = []
        for group in config.queries:
            if not group.prefix:
                raise ConfigurationError("Query rule without a prefix")
            field_routes.append(FieldRoute(prefix=group.prefix, patterns=compile_matches(group.prefix, group.matches)))

        type_routes: dict[str, str] = {}
        for rule in config.types:
            if not rule.name:
                raise ConfigurationError(f"Type rule with prefix '{rule.prefix}' has no name")
            if not rule.prefix:
                raise ConfigurationError(f"Type rule for '{rule.name}' has no prefix")
            type_routes.setdefault(rule.name, rule.prefix)

        return cls(field_routes, type_routes)

    def resolve_field(self, name: str) -> str | None:
        for route in self.field_routes:
            if route.matches(name):
                return route.prefix
        return None

    def resolve_type(self, name: str) -> str | None:
        return self.type_routes.get(name)


def compile_matches(prefix: str, matches: list[str]) -> tuple[re.Pattern[str], ...]:
    """Compile the case-insensitive patterns of one query group."""
    if not matches:
        raise ConfigurationError(f"Query rule '{prefix}' has no matches")

    compiled: list[re.Pattern[str]] = []
    for pattern in matches:
        if not pattern.strip():
            raise ConfigurationError(f"Query rule '{prefix}' has an empty match")
        try:
            compiled.append(re.compile(pattern, re.IGNORECASE))
        except re.error as exc:
            raise ConfigurationError(f"Query rule '{prefix}' has an invalid match '{pattern}': {exc}") from exc
    return tuple(compiled)
