"""
Navigation bar for the site builder.

``build_nav`` resolves the configured entries once per build; ``render_nav``
turns them into markup once per page, with every internal href relative to
that page's output location.
"""

import html
from dataclasses import dataclass
from typing import Sequence

from md2site.config import ExternalNav, InternalNav, SiteConfig
from md2site.errors import NavigationError
from md2site.frontmatter import extract_frontmatter, metadata_text
from md2site.renderer import first_heading_text, markdown_to_html
from md2site.resolver import (
    DIRECTORY_INDEX_FILENAME,
    HOME_FILENAME,
    SITE_ROOT_ARTIFACT,
    BuildContext,
    is_content_file,
    relative_href,
    resolve,
)
from md2site.theme import fill_template

# Tried in order when a nav target names a directory
DIRECTORY_PAGES = (DIRECTORY_INDEX_FILENAME, HOME_FILENAME)


@dataclass(frozen=True)
class ResolvedNavEntry:
    title: str
    external: bool
    href: str | None = None
    output_path: str | None = None


# ---------------------------------------------------------------------------
# Build time
# ---------------------------------------------------------------------------

def _infer_title(ctx: BuildContext, content_path: str, label: str) -> str:
    """Title of a nav target page: front matter title, else its first <h1>."""
    source = ctx.source_root / content_path
    try:
        raw = source.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise NavigationError(f"{label}: cannot read {source}: {exc}") from exc

    metadata, body = extract_frontmatter(raw)
    title = metadata_text(metadata, "title") or first_heading_text(markdown_to_html(body))
    if title is None:
        raise NavigationError(f"{label}: no title given and no H1 heading found in {content_path}")
    return title


def _find_content(ctx: BuildContext, target: str, label: str) -> str:
    """Tree-relative content file a nav target points at."""
    path = ctx.source_root / target
    if is_content_file(target):
        if not path.is_file():
            raise NavigationError(f"{label}: file not found: {path}")
        return target

    if path.is_dir():
        for name in DIRECTORY_PAGES:
            if (path / name).is_file():
                return f"{target}/{name}"
        raise NavigationError(
            f"{label}: directory has no {' or '.join(DIRECTORY_PAGES)}: {path}"
        )

    raise NavigationError(f"{label}: target is neither a markdown file nor a directory: {path}")


def build_nav(config: SiteConfig, ctx: BuildContext) -> list[ResolvedNavEntry]:
    """Resolve every configured nav entry, preserving declaration order.

    Raises NavigationError on the first entry that cannot be resolved.
    """
    entries = []

    for position, item in enumerate(config.nav, start=1):
        if isinstance(item, ExternalNav):
            entries.append(ResolvedNavEntry(title=item.title, external=True, href=item.href))
            continue

        if not isinstance(item, InternalNav):
            raise NavigationError(f"nav entry #{position}: unsupported entry {item!r}")

        label = f"nav entry #{position} ({item.target!r})"
        content_path = _find_content(ctx, item.target, label)
        title = item.title or _infer_title(ctx, content_path, label)
        entries.append(
            ResolvedNavEntry(
                title=title,
                external=False,
                output_path=resolve(content_path, ctx.home_basename),
            )
        )

    return entries


# ---------------------------------------------------------------------------
# Render time
# ---------------------------------------------------------------------------

def render_nav_link(entry: ResolvedNavEntry, current_output: str) -> str:
    title = html.escape(entry.title)
    if entry.external:
        return (
            f'<a href="{html.escape(entry.href)}" target="_blank" '
            f'rel="noopener noreferrer">{title}</a>'
        )

    href = html.escape(relative_href(entry.output_path, current_output))
    if entry.output_path == current_output:
        return f'<a href="{href}" aria-current="page">{title}</a>'
    return f'<a href="{href}">{title}</a>'


def render_nav(
    entries: Sequence[ResolvedNavEntry],
    current_output: str,
    site_title: str,
    nav_template: str,
) -> str:
    """Render the nav shell for the page at *current_output*."""
    home_href = html.escape(relative_href(SITE_ROOT_ARTIFACT, current_output))
    values = {
        "TITLE_HTML": f'<a href="{home_href}" class="site-title">{html.escape(site_title)}</a>',
        "LINKS_HTML": " ".join(render_nav_link(e, current_output) for e in entries),
    }
    return fill_template(nav_template, values)
