"""Re-normalize artifacts already installed under a Factory base directory."""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Tuple, Union

from droidport.kernel.normalizer import normalize_text

logger = logging.getLogger(__name__)

# Subdirectory -> normalizer kind
INSTALLED_DIRS = (
    ("commands", "command"),
    ("droids", "droid"),
    ("skills", "skill"),
)


@dataclass
class NormalizeInstalledResult:
    scanned: int = 0
    changed: int = 0
    changed_paths: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)


def _markdown_files(base_dir: Path) -> List[Tuple[str, Path]]:
    files: List[Tuple[str, Path]] = []
    for subdir, kind in INSTALLED_DIRS:
        root = base_dir / subdir
        if not root.is_dir():
            continue
        for path in sorted(root.rglob("*")):
            if path.is_file() and path.suffix.lower() == ".md":
                files.append((kind, path))
    return files


def normalize_installed(base_dir: Union[str, Path], dry_run: bool = False) -> NormalizeInstalledResult:
    """Rewrite legacy patterns in installed commands, droids and skills.

    Per-file failures are recorded and never stop the walk.
    """
    result = NormalizeInstalledResult()
    for kind, path in _markdown_files(Path(base_dir)):
        result.scanned += 1
        try:
            content = path.read_text(encoding="utf-8")
            normalized = normalize_text(content, kind=kind, add_marker=False)
            if not normalized.changed:
                logger.debug("Unchanged: %s", path)
                continue
            if not dry_run:
                path.write_text(normalized.text, encoding="utf-8")
            result.changed += 1
            result.changed_paths.append(str(path))
            logger.info("%s %s", "Would normalize" if dry_run else "Normalized", path)
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Failed to normalize %s: %s", path, e)
            result.errors.append(f"{path}: {e}")
    return result
