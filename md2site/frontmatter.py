"""
Front matter extraction for markdown pages.

Parses YAML front matter (between --- delimiters) at the top of a .md file.
Only two keys affect rendering:

  - title        overrides the page's first heading
  - description  overrides the description derived from the title

Everything else is kept in the returned dict untouched.  A broken metadata
block never stops a build: the page is rendered with no metadata.
"""

import re

import yaml


# ---------------------------------------------------------------------------
# Extraction
# ---------------------------------------------------------------------------

_FRONTMATTER_RE = re.compile(r"\A---[ \t]*\r?\n(?:(.*?)\r?\n)?---[ \t]*(?:\r?\n|\Z)", re.DOTALL)


def extract_frontmatter(text: str) -> tuple[dict, str]:
    """Split leading YAML front matter from markdown body.

    Returns:
        (metadata_dict, body_without_frontmatter)
        If no front matter is found, returns ({}, original_text).
        If the block is present but is not a YAML mapping, the block is
        still removed from the body and the metadata is empty.
    """
    m = _FRONTMATTER_RE.match(text)
    if m is None:
        return {}, text

    raw_yaml = m.group(1) or ""
    body = text[m.end():]

    try:
        parsed = yaml.safe_load(raw_yaml)
    except yaml.YAMLError:
        return {}, body

    if not isinstance(parsed, dict):
        return {}, body

    return parsed, body


def metadata_text(metadata: dict, key: str) -> str | None:
    """Return a stripped string value for *key*, or None if absent or blank.

    Non-string values (numbers, lists, dates) are ignored.
    """
    value = metadata.get(key)
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None
