"""Static page assets injected verbatim into the report header."""
import importlib.resources
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple, Union

from .errors import InputNotFoundError

STATIC_PACKAGE = "nunit2html"
BUNDLED_SCRIPTS = ("report.js",)
BUNDLED_STYLES = ("report.css",)


@dataclass(frozen=True)
class Assets:
    """Script and style text blobs, kept in the order they are embedded."""

    scripts: Tuple[str, ...] = ()
    styles: Tuple[str, ...] = ()


def _bundled() -> Assets:
    static = importlib.resources.files(STATIC_PACKAGE) / "static"
    return Assets(
        scripts=tuple(static.joinpath(n).read_text(encoding="utf-8") for n in BUNDLED_SCRIPTS),
        styles=tuple(static.joinpath(n).read_text(encoding="utf-8") for n in BUNDLED_STYLES),
    )


def load_assets(assets_dir: Optional[Union[str, Path]] = None) -> Assets:
    """Bundled assets, or every ``*.js``/``*.css`` of *assets_dir* sorted by name.

    A directory replaces the bundled files entirely, so it can hold e.g. the
    real jQuery and Bootstrap 3 distribution files.
    """
    if assets_dir is None:
        return _bundled()
    directory = Path(assets_dir)
    if not directory.is_dir():
        raise InputNotFoundError(directory, "assets directory does not exist")
    return Assets(
        scripts=tuple(p.read_text(encoding="utf-8") for p in sorted(directory.glob("*.js"))),
        styles=tuple(p.read_text(encoding="utf-8") for p in sorted(directory.glob("*.css"))),
    )
