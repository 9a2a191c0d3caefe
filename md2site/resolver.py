"""
Path resolution for the site builder.

Maps a content file's tree-relative path to the HTML artifact it becomes,
and computes relative hrefs between artifacts.  Both the navigation builder
and the link rewriter go through ``resolve()`` so the two always agree on
where a page lives.

    README.md          → index.html        (home page)
    404.md             → 404.html          (not-found page, never nested)
    foo/index.md       → foo/index.html
    foo.md             → foo/index.html
    foo/bar.md         → foo/bar/index.html
"""

import posixpath
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Callable


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

CONTENT_SUFFIX = ".md"
HOME_FILENAME = "README.md"
NOT_FOUND_FILENAME = "404.md"
DIRECTORY_INDEX_FILENAME = "index.md"

INDEX_ARTIFACT = "index.html"
SITE_ROOT_ARTIFACT = INDEX_ARTIFACT
NOT_FOUND_ARTIFACT = "404.html"

_INDEX_SUFFIX_RE = re.compile(r"(?:^|/)index\.html$")


@dataclass(frozen=True)
class BuildContext:
    """Everything a build needs to know about where things live.

    Passed explicitly to every resolver, rewriter and renderer call instead
    of reading the process working directory.
    """

    source_root: Path
    output_root: Path
    home_basename: str = HOME_FILENAME

    def output_file(self, output_path: str) -> Path:
        """Absolute filesystem location of a tree-relative output path."""
        return self.output_root.joinpath(*output_path.split("/"))


def is_content_file(name: str) -> bool:
    return name.lower().endswith(CONTENT_SUFFIX)


def normalize(path: str) -> str:
    """Normalise a tree-relative path: POSIX separators, no ``.`` segments.

    A leading slash is read as "from the tree root".  Returns ``""`` for the
    tree root itself.
    """
    path = str(path).replace("\\", "/").lstrip("/")
    path = posixpath.normpath(path) if path else ""
    return "" if path == "." else path


# ---------------------------------------------------------------------------
# Resolution rules, evaluated in order
# ---------------------------------------------------------------------------

def _rule_home(directory: str, basename: str, home_basename: str) -> str | None:
    if directory == "" and basename in (home_basename, HOME_FILENAME):
        return SITE_ROOT_ARTIFACT
    return None


def _rule_not_found(directory: str, basename: str, home_basename: str) -> str | None:
    if directory == "" and basename == NOT_FOUND_FILENAME:
        return NOT_FOUND_ARTIFACT
    return None


def _rule_directory_index(directory: str, basename: str, home_basename: str) -> str | None:
    if basename == DIRECTORY_INDEX_FILENAME:
        return posixpath.join(directory, INDEX_ARTIFACT)
    return None


def _rule_page(directory: str, basename: str, home_basename: str) -> str | None:
    stem = basename[: -len(CONTENT_SUFFIX)] if is_content_file(basename) else basename
    return posixpath.join(directory, stem, INDEX_ARTIFACT)


Rule = Callable[[str, str, str], str | None]

RESOLUTION_RULES: tuple[tuple[str, Rule], ...] = (
    ("home", _rule_home),
    ("not_found", _rule_not_found),
    ("directory_index", _rule_directory_index),
    ("page", _rule_page),
)


def resolve(content_path: str, home_basename: str = HOME_FILENAME) -> str:
    """Map a tree-relative content path to its tree-relative output path.

    The first rule in ``RESOLUTION_RULES`` that matches wins; the last rule
    matches everything, so every input resolves to exactly one artifact.
    """
    rel = normalize(content_path)
    directory, basename = posixpath.split(rel)
    for _name, rule in RESOLUTION_RULES:
        output = rule(directory, basename, home_basename)
        if output is not None:
            return output
    raise AssertionError(f"no resolution rule matched {content_path!r}")


# ---------------------------------------------------------------------------
# Relative hrefs between artifacts
# ---------------------------------------------------------------------------

def relative_path(target: str, current_output: str) -> str:
    """Relative path from the directory of *current_output* to *target*.

    Both arguments are tree-relative output paths.
    """
    start = posixpath.dirname(current_output) or "."
    return posixpath.relpath(target or ".", start)


def relative_href(target_output: str, current_output: str) -> str:
    """Clean relative URL from one page to another.

    The trailing ``index.html`` is dropped so links read as directory URLs:
    from ``blog/post/index.html`` to ``about/index.html`` gives ``../../about``.
    """
    href = relative_path(target_output, current_output)
    href = _INDEX_SUFFIX_RE.sub("", href)
    return href or "."
