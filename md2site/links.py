"""
Link and asset rewriting for rendered pages.

A page written at ``blog/post.md`` ends up at ``blog/post/index.html``, one
directory deeper than its source.  Embedded resources (images, media,
stylesheets, scripts) referenced relative to the source file would break, so
their paths are re-expressed relative to the page's output location:

    <img src="../img/logo.png?v=2#frag">   in blog/post.md
    → <img src="../../img/logo.png?v=2#frag">

Hyperlinks (``<a href>``) are left exactly as authored.  External URLs,
``mailto:``/``tel:`` links, other URI schemes and in-page ``#fragments`` are
never touched.  Query strings and fragments are carried through verbatim.
"""

import posixpath
import re

from bs4 import BeautifulSoup

from md2site.resolver import HOME_FILENAME, is_content_file, relative_path, resolve

# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------

# (tag, attribute) pairs that reference another location
REFERENCE_ATTRIBUTES = [
    ("a", "href"),
    ("img", "src"),
    ("video", "src"),
    ("video", "poster"),
    ("audio", "src"),
    ("source", "src"),
    ("track", "src"),
    ("link", "href"),
    ("script", "src"),
    ("embed", "src"),
]

HYPERLINK_TAGS = {"a"}

_EXTERNAL_RE = re.compile(r"^(?:https?:)?//", re.IGNORECASE)
_SPECIAL_RE = re.compile(r"^(?:mailto:|tel:|#)", re.IGNORECASE)
_SCHEME_RE = re.compile(r"^[a-z][a-z0-9+.\-]*:", re.IGNORECASE)
_SPLIT_RE = re.compile(r"[?#]")


def is_untouchable(value: str) -> bool:
    """True for references that must be returned byte-identical.

    Covers http(s) and protocol-relative URLs, mailto:/tel:, pure in-page
    fragments and any other URI scheme (data:, ftp:, ...).
    """
    return bool(
        _EXTERNAL_RE.match(value)
        or _SPECIAL_RE.match(value)
        or _SCHEME_RE.match(value)
    )


def split_reference(value: str) -> tuple[str, str]:
    """Split a reference into (path, suffix) at the first ``?`` or ``#``.

    The suffix keeps its leading delimiter so ``path + suffix == value``.
    """
    m = _SPLIT_RE.search(value)
    if m is None:
        return value, ""
    return value[: m.start()], value[m.start():]


# ---------------------------------------------------------------------------
# Rewriting
# ---------------------------------------------------------------------------

def resolve_asset(
    path: str,
    source_path: str,
    output_path: str,
    home_basename: str = HOME_FILENAME,
) -> str | None:
    """Rewrite an asset path so it works from the page's output location.

    Args:
        path:          The path component of the reference, as authored.
        source_path:   Tree-relative path of the content file containing it.
        output_path:   Tree-relative output path of that page.
        home_basename: Home file basename, passed through to ``resolve()``.

    Returns:
        The new relative path, or None when the reference cannot be
        resolved inside the tree (left unchanged by the caller).
    """
    if path.startswith("/"):
        target = path.lstrip("/")
    else:
        target = posixpath.join(posixpath.dirname(source_path), path)

    target = posixpath.normpath(target) if target else "."
    if target == "." or target == ".." or target.startswith("../"):
        return None

    if is_content_file(target):
        target = resolve(target, home_basename)

    new_path = relative_path(target, output_path)
    if path.endswith("/") and not new_path.endswith("/"):
        new_path += "/"
    return new_path


def rewrite_reference(
    value: str,
    tag: str,
    source_path: str,
    output_path: str,
    home_basename: str = HOME_FILENAME,
) -> str:
    """Rewrite one href/src value found on *tag*."""
    if tag in HYPERLINK_TAGS:
        # Hyperlinks keep their authored target; only an empty one is patched
        return value or "."

    if not value or is_untouchable(value):
        return value

    path, suffix = split_reference(value)
    if not path:
        return value

    new_path = resolve_asset(path, source_path, output_path, home_basename)
    if new_path is None:
        return value
    return new_path + suffix


def rewrite_links(
    fragment: str,
    source_path: str,
    output_path: str,
    home_basename: str = HOME_FILENAME,
) -> str:
    """Rewrite every reference attribute in an HTML fragment.

    Args:
        fragment:      Rendered, sanitised HTML.
        source_path:   Tree-relative path of the content file (``blog/post.md``).
        output_path:   That page's resolved output path (``blog/post/index.html``).
        home_basename: Home file basename used by the build.
    """
    soup = BeautifulSoup(fragment, "html.parser")

    for tag_name, attr in REFERENCE_ATTRIBUTES:
        for el in soup.find_all(tag_name):
            if not el.has_attr(attr):
                continue
            raw = el[attr]
            new = rewrite_reference(raw, tag_name, source_path, output_path, home_basename)
            if new != raw:
                el[attr] = new

    return str(soup)
