from __future__ import annotations

from pathlib import Path
from typing import Iterable


ROOT_MARKERS = ("config.yaml", ".git")


def resolve_path(repo_root: Path, p: Path | str) -> Path:
    """Resolve `p` against `repo_root` unless it is already absolute."""
    p_path = Path(p) if isinstance(p, str) else p
    if not p_path.is_absolute():
        p_path = repo_root / p_path
    return p_path.resolve()


def _find_marked_dir(start: Path) -> Path | None:
    dirs: Iterable[Path] = (start, *start.parents)
    for candidate in dirs:
        if any((candidate / marker).exists() for marker in ROOT_MARKERS):
            return candidate
    return None


def get_repo_root() -> Path:
    """Return the nearest directory holding `config.yaml` or `.git`.

    The working directory is tried first, then the installed package location,
    so the CLI works both from a checkout and from an editable install.
    """
    for start in (Path.cwd().resolve(), Path(__file__).resolve().parent):
        found = _find_marked_dir(start)
        if found is not None:
            return found

    raise FileNotFoundError(f"No repo root found above {Path.cwd()} (looked for {', '.join(ROOT_MARKERS)}).")
