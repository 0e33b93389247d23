import os
from collections.abc import Iterable, Mapping
from pathlib import Path

from types_splitter.errors import SchemaLoadError

SCHEMA_EXTENSIONS = (".graphql", ".graphqls", ".gql")


def is_schema_file(path: Path) -> bool:
    return path.is_file() and path.suffix.lower() in SCHEMA_EXTENSIONS


def discover_schema_files(paths: Iterable[str | Path]) -> list[Path]:
    """Expand directories into the schema files below them, keeping the given order and dropping duplicates."""
    files: list[Path] = []
    for path in paths:
        file_path = Path(path)
        if file_path.is_dir():
            files.extend(sorted(candidate for candidate in file_path.rglob("*") if is_schema_file(candidate)))
        elif file_path.is_file():
            files.append(file_path)
        else:
            raise SchemaLoadError(f"File not found: {path}")

    unique: dict[Path, Path] = {}
    for file_path in files:
        unique.setdefault(file_path.resolve(), file_path)
    return list(unique.values())


def default_root(files: list[Path]) -> Path:
    if not files:
        return Path.cwd()
    return Path(os.path.commonpath([str(file_path.resolve().parent) for file_path in files]))


def source_name(path: Path, root: Path) -> str:
    """Buffer name of ``path``: its POSIX path relative to ``root``."""
    try:
        return path.resolve().relative_to(root.resolve()).as_posix()
    except ValueError:
        raise SchemaLoadError(f"{path} is not below {root}") from None


def read_sources(paths: Iterable[str | Path], root: Path | None = None) -> tuple[dict[str, str], Path]:
    """Read every schema file under ``paths``; returns the sources by name and the root they are relative to."""
    files = discover_schema_files(paths)
    resolved_root = root if root is not None else default_root(files)

    sources: dict[str, str] = {}
    for file_path in files:
        try:
            text = file_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise SchemaLoadError(f"Cannot read {file_path}: {exc}") from exc
        sources[source_name(file_path, resolved_root)] = text
    return sources, resolved_root


def write_outputs(outputs: Mapping[str, str], directory: Path) -> list[Path]:
    written: list[Path] = []
    for name, text in outputs.items():
        target = directory / name
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(text, encoding="utf-8")
        written.append(target)
    return written


def remove_sources(names: Iterable[str], directory: Path) -> list[Path]:
    removed: list[Path] = []
    for name in names:
        target = directory / name
        target.unlink(missing_ok=True)
        removed.append(target)
    return removed
