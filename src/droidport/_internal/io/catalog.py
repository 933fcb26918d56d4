"""Catalog I/O helpers (internal)."""

from pathlib import Path
from typing import Union

from droidport.kernel.catalog import ToolCatalog


def load_catalog_from_path(path: Union[str, Path]) -> ToolCatalog:
    """Load a tool catalog from a JSON file path."""
    catalog_path = Path(path)
    data = catalog_path.read_bytes()
    return ToolCatalog.from_json_bytes(data)
