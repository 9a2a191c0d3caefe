"""
Site configuration for the site builder.

Loads ``.render/config.yml`` and validates it once, up front:

    site_title: My Site
    home_md: README.md
    nav:
      - About: about.md                 # internal page
      - Guides: guides/                 # directory with index.md / README.md
      - Source: https://github.com/me   # external link
      - Mail: mailto:me@example.com
      - notes.md                        # title taken from the page itself

Every navigation item becomes either an ``ExternalNav`` or an
``InternalNav``.  Any other shape is rejected with an error that names the
offending entry.
"""

import posixpath
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Union

import yaml

from md2site.errors import ConfigError, NavigationError
from md2site.resolver import is_content_file

# ---------------------------------------------------------------------------
# Model
# ---------------------------------------------------------------------------

_EXTERNAL_TARGET_RE = re.compile(r"^(?:(?:https?:)?//\S|mailto:\S|tel:\S)", re.IGNORECASE)
_SCHEME_RE = re.compile(r"^[a-z][a-z0-9+.\-]*:", re.IGNORECASE)


@dataclass(frozen=True)
class ExternalNav:
    """A navigation link to an absolute URL or a mailto:/tel: URI."""

    title: str
    href: str


@dataclass(frozen=True)
class InternalNav:
    """A navigation link to a content file or content directory.

    ``title`` is None when the entry was declared as a bare path; the
    navigation builder then takes it from the target page.
    """

    title: str | None
    target: str


NavEntry = Union[ExternalNav, InternalNav]


@dataclass(frozen=True)
class SiteConfig:
    site_title: str
    home_md: str
    nav: tuple[NavEntry, ...] = ()

    @property
    def home_basename(self) -> str:
        return posixpath.basename(self.home_md)


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

def _require_text(data: dict, key: str) -> str:
    value = data.get(key)
    if value is None:
        raise ConfigError(f"Missing {key} in config")
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(f"{key} must be a non-empty string, got {value!r}")
    return value.strip()


def _clean_relative(path: str) -> str | None:
    """Normalise a relative content path; None if it is absolute or leaves the tree."""
    path = path.replace("\\", "/")
    if path.startswith("/"):
        return None
    path = posixpath.normpath(path)
    if path == ".." or path.startswith("../"):
        return None
    return path


def parse_nav_target(title: str | None, target: str, position: int) -> NavEntry:
    """Classify one navigation target.

    Args:
        title:    Display title, or None for a bare-path entry.
        target:   URL or relative content path from the config.
        position: 1-based index of the entry, used in error messages.
    """
    label = f"nav entry #{position} ({target!r})"

    if _EXTERNAL_TARGET_RE.match(target):
        return ExternalNav(title=title or target, href=target)

    if _SCHEME_RE.match(target):
        raise NavigationError(
            f"{label}: unsupported target; use http(s)://, mailto:, tel: or a relative path"
        )

    cleaned = _clean_relative(target)
    if cleaned is None or cleaned == ".":
        raise NavigationError(f"{label}: target must be a path inside the content tree")

    return InternalNav(title=title, target=cleaned)


def parse_nav(items) -> tuple[NavEntry, ...]:
    """Validate the ``nav`` list from the config file."""
    if items is None:
        return ()
    if not isinstance(items, list):
        raise ConfigError(f"nav must be a list, got {type(items).__name__}")

    entries = []
    for position, item in enumerate(items, start=1):
        if isinstance(item, str):
            if not item.strip():
                raise NavigationError(f"nav entry #{position}: empty target")
            entries.append(parse_nav_target(None, item.strip(), position))
            continue

        if not isinstance(item, dict) or len(item) != 1:
            raise NavigationError(
                f"nav entry #{position} ({item!r}): expected a single 'Title: target' pair"
            )

        (title, target), = item.items()
        if not isinstance(title, str) or not title.strip():
            raise NavigationError(f"nav entry #{position} ({item!r}): missing title")
        if not isinstance(target, str) or not target.strip():
            raise NavigationError(
                f"nav entry #{position} ({title!r}): missing or non-string target"
            )
        entries.append(parse_nav_target(title.strip(), target.strip(), position))

    return tuple(entries)


def parse_config(data, source_root: Path) -> SiteConfig:
    """Build a validated ``SiteConfig`` from already-parsed YAML data."""
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError("Config must be a YAML mapping")

    site_title = _require_text(data, "site_title")
    home_md = _require_text(data, "home_md")

    cleaned = _clean_relative(home_md)
    if cleaned is None:
        raise ConfigError(f"home_md must be a relative path inside the content tree: {home_md!r}")
    if not is_content_file(cleaned):
        raise ConfigError(f"home_md must be a markdown file: {home_md!r}")
    if not (source_root / cleaned).is_file():
        raise ConfigError(f"home_md not found: {source_root / cleaned}")

    return SiteConfig(
        site_title=site_title,
        home_md=cleaned,
        nav=parse_nav(data.get("nav")),
    )


def load_config(config_path: Path, source_root: Path) -> SiteConfig:
    """Read and validate the YAML config file."""
    if not config_path.is_file():
        raise ConfigError(f"Config file not found: {config_path}")

    try:
        data = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ConfigError(f"Config file is not valid YAML: {config_path}: {exc}") from exc

    return parse_config(data, source_root)
