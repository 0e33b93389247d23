"""Shared fixtures and helpers for tests."""

from collections.abc import Callable
from pathlib import Path

import pytest

from types_splitter.core.document import Document, ExcisionEvent
from types_splitter.core.schema import GraphQLCoreParser, load_document

_REPO_ROOT = Path(__file__).parent.parent


# ---------------------------------------------------------------------------
# Auto-marker: tag tests as "unit" or "integration" based on directory
# ---------------------------------------------------------------------------


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        test_path = Path(str(item.fspath))
        rel = test_path.relative_to(_REPO_ROOT / "tests")
        parts = rel.parts
        if parts and parts[0] == "integration":
            item.add_marker(pytest.mark.integration)
        else:
            item.add_marker(pytest.mark.unit)


# ---------------------------------------------------------------------------
# Shared unit-test fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def data_dir() -> Path:
    """Return the path to the golden schema files."""
    return Path(__file__).parent / "data"


@pytest.fixture
def parser() -> GraphQLCoreParser:
    return GraphQLCoreParser()


@pytest.fixture
def events() -> list[ExcisionEvent]:
    return []


@pytest.fixture
def load(events: list[ExcisionEvent]) -> Callable[..., Document]:
    """Build a document from ``name=text`` pairs, recording every excision in ``events``."""

    def _load(sources: dict[str, str]) -> Document:
        return load_document(sources, observer=events.append)

    return _load
