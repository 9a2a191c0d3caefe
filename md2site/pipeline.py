"""
Page rendering for the site builder.

Turns one content file into one finished HTML page:
- Splits off front matter
- Converts markdown to sanitised HTML
- Assigns heading ids
- Rewrites asset references for the page's output location
- Resolves title and description
- Renders navigation and fills the page template

Pages depend only on the shared, read-only ``PageContext``; they can be
rendered in any order or in parallel.
"""

import html
from dataclasses import dataclass

from md2site.config import SiteConfig
from md2site.errors import BuildError
from md2site.frontmatter import extract_frontmatter, metadata_text
from md2site.links import rewrite_links
from md2site.navigation import ResolvedNavEntry, render_nav
from md2site.renderer import assign_heading_ids, first_heading_text, markdown_to_html
from md2site.resolver import BuildContext, relative_path, resolve
from md2site.theme import Theme, fill_template


@dataclass(frozen=True)
class PageContext:
    """Read-only state shared by every page in a build."""

    build: BuildContext
    config: SiteConfig
    theme: Theme
    nav: tuple[ResolvedNavEntry, ...]
    stylesheet_path: str


@dataclass(frozen=True)
class RenderedPage:
    source: str
    output_path: str
    html: str


# ---------------------------------------------------------------------------
# Title and description
# ---------------------------------------------------------------------------

def page_title(metadata: dict, content_html: str, site_title: str) -> str:
    """Front matter title, else the first <h1>, else the site title."""
    return (
        metadata_text(metadata, "title")
        or first_heading_text(content_html)
        or site_title
    )


def page_description(metadata: dict, title: str) -> str:
    """Front matter description, else the page title."""
    return metadata_text(metadata, "description") or title


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------

def render_page(source: str, ctx: PageContext) -> RenderedPage:
    """Render the content file at tree-relative path *source*."""
    home_basename = ctx.build.home_basename
    output_path = resolve(source, home_basename)

    source_file = ctx.build.source_root / source
    try:
        raw = source_file.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise BuildError(f"Cannot read {source_file}: {exc}") from exc
    metadata, body = extract_frontmatter(raw)

    content = markdown_to_html(body)
    content = assign_heading_ids(content)
    content = rewrite_links(content, source, output_path, home_basename)

    title = page_title(metadata, content, ctx.config.site_title)
    description = page_description(metadata, title)

    nav_html = render_nav(ctx.nav, output_path, ctx.config.site_title, ctx.theme.nav_template)

    page_html = fill_template(
        ctx.theme.page_template,
        {
            "TITLE": html.escape(title),
            "DESCRIPTION": html.escape(description),
            "NAV": nav_html,
            "STYLESHEET_HREF": relative_path(ctx.stylesheet_path, output_path),
            "CONTENT": content,
        },
    )
    return RenderedPage(source=source, output_path=output_path, html=page_html)


def write_page(page: RenderedPage, build: BuildContext) -> None:
    out_file = build.output_file(page.output_path)
    out_file.parent.mkdir(parents=True, exist_ok=True)
    out_file.write_text(page.html, encoding="utf-8")


def build_page(source: str, ctx: PageContext) -> RenderedPage:
    """Render and write one page."""
    page = render_page(source, ctx)
    write_page(page, ctx.build)
    print(f"  [page] {page.source} → {page.output_path}")
    return page
