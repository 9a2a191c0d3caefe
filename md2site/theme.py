"""
Templates and stylesheet for the site builder.

A site can ship its own ``index.html`` / ``nav.html`` / ``style.css`` in
``.render/template/``; any file it leaves out comes from the defaults
packaged in ``md2site/templates/``.
"""

import hashlib
import re
from dataclasses import dataclass
from pathlib import Path

from md2site.errors import BuildError

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "templates"
PAGE_TEMPLATE = "index.html"
NAV_TEMPLATE = "nav.html"
STYLESHEET = "style.css"

ASSETS_DIR = "assets"
HASH_LENGTH = 8

_PLACEHOLDER_RE = re.compile(r"\{\{([A-Z_]+)\}\}")


@dataclass(frozen=True)
class Theme:
    page_template: str
    nav_template: str
    stylesheet: Path


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------

def _pick(template_dir: Path | None, name: str) -> Path:
    if template_dir is not None and (template_dir / name).is_file():
        return template_dir / name
    fallback = DEFAULT_TEMPLATE_DIR / name
    if not fallback.is_file():
        raise BuildError(f"Template not found: {name}")
    return fallback


def load_theme(template_dir: Path | None = None) -> Theme:
    """Load the page and nav templates and locate the stylesheet."""
    return Theme(
        page_template=_pick(template_dir, PAGE_TEMPLATE).read_text(encoding="utf-8"),
        nav_template=_pick(template_dir, NAV_TEMPLATE).read_text(encoding="utf-8"),
        stylesheet=_pick(template_dir, STYLESHEET),
    )


# ---------------------------------------------------------------------------
# Substitution
# ---------------------------------------------------------------------------

def fill_template(template: str, values: dict[str, str]) -> str:
    """Replace ``{{NAME}}`` placeholders in a single pass.

    Inserted values are never scanned again, and placeholders without a
    value are left as they are.
    """
    return _PLACEHOLDER_RE.sub(lambda m: values.get(m.group(1), m.group(0)), template)


# ---------------------------------------------------------------------------
# Stylesheet
# ---------------------------------------------------------------------------

def hashed_stylesheet_name(css: bytes) -> str:
    """``style.<first 8 hex chars of sha1>.css`` for the given bytes."""
    digest = hashlib.sha1(css).hexdigest()[:HASH_LENGTH]
    return f"style.{digest}.css"


def copy_stylesheet(stylesheet: Path, output_root: Path) -> str:
    """Copy the stylesheet under a content-hashed name.

    Returns the tree-relative output path, e.g. ``assets/style.1a2b3c4d.css``.
    """
    css = stylesheet.read_bytes()
    name = hashed_stylesheet_name(css)

    out_dir = output_root / ASSETS_DIR
    out_dir.mkdir(parents=True, exist_ok=True)
    (out_dir / name).write_bytes(css)

    return f"{ASSETS_DIR}/{name}"
