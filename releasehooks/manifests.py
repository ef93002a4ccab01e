"""Load rendered manifests from YAML files into one flattened sequence.

Paths are read in the order given. Directories are walked recursively
with entries sorted by name, so a package's sub-package output under
``charts/`` lands wherever its path sorts. Within a file, documents keep
their file order. Nothing is reordered by origin after that.
"""

import logging
import sys
from pathlib import Path
from typing import Any, Iterable, Union

import yaml

from .errors import ManifestError

logger = logging.getLogger(__name__)

YAML_SUFFIXES = (".yaml", ".yml")


def parse_manifests(text: str, source: str = "<string>") -> list[dict[str, Any]]:
    """Parse a multi-document YAML string, dropping empty documents."""
    try:
        documents = list(yaml.safe_load_all(text))
    except yaml.YAMLError as e:
        raise ManifestError(f"{source}: invalid YAML: {e}") from e

    manifests = []
    for doc in documents:
        if doc is None:
            continue
        if not isinstance(doc, dict):
            logger.warning("Skipping non-mapping document in %s", source)
            continue
        # A List kind wraps several objects in one document.
        if doc.get("kind") == "List" and isinstance(doc.get("items"), list):
            manifests.extend(item for item in doc["items"] if isinstance(item, dict))
            continue
        manifests.append(doc)
    return manifests


def _iter_files(path: Path) -> Iterable[Path]:
    if path.is_dir():
        for child in sorted(path.iterdir()):
            if child.is_dir() or child.suffix in YAML_SUFFIXES:
                yield from _iter_files(child)
    else:
        yield path


def load_manifests(paths: Iterable[Union[str, Path]]) -> list[dict[str, Any]]:
    """Read every manifest under ``paths``. ``-`` reads standard input."""
    manifests: list[dict[str, Any]] = []

    for raw in paths:
        if str(raw) == "-":
            manifests.extend(parse_manifests(sys.stdin.read(), "<stdin>"))
            continue

        root = Path(raw).expanduser()
        if not root.exists():
            raise ManifestError(f"{root}: no such file or directory")

        for file in _iter_files(root):
            try:
                text = file.read_text(encoding="utf-8")
            except OSError as e:
                raise ManifestError(f"{file}: {e}") from e
            found = parse_manifests(text, str(file))
            logger.debug("Loaded %d manifest(s) from %s", len(found), file)
            manifests.extend(found)

    return manifests
