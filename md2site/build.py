"""
Build pipeline for markdown tree → static site conversion.

Orchestrates:
  1. Config — load and validate .render/config.yml
  2. Discovery — walk the content tree, detect output collisions
  3. Assets — hashed stylesheet, navigation, static file copy
  4. Pages — render every .md file to <dir>/<name>/index.html

Usage:
    md2site /path/to/content
    md2site /path/to/content -o /path/to/output
    md2site /path/to/content --config site.yml --templates theme/
    md2site /path/to/content --jobs 8
"""

import argparse
import shutil
import sys
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path

from md2site.config import load_config
from md2site.errors import BuildError, SiteBuildError
from md2site.manifest import IGNORE_DIRS, check_output_collisions, copy_static_files, discover
from md2site.navigation import build_nav
from md2site.pipeline import PageContext, build_page
from md2site.resolver import SITE_ROOT_ARTIFACT, BuildContext
from md2site.theme import copy_stylesheet, load_theme

# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------

DEFAULT_OUTPUT_DIR = "_site"
RENDER_DIR = ".render"
DEFAULT_CONFIG_NAME = "config.yml"
DEFAULT_TEMPLATE_DIR = "template"


# ---------------------------------------------------------------------------
# Pipeline
# ---------------------------------------------------------------------------

def _check_output_location(source: Path, output: Path) -> None:
    """Refuse output directories that would delete or be read as content.

    An output directory inside the source tree is only allowed where the
    content walk never looks: under a hidden or ignored directory such as
    the default ``_site``.
    """
    if output == source or output in source.parents:
        raise BuildError(f"Refusing to use {output} as output: it contains the source tree")
    if source in output.parents:
        parts = output.relative_to(source).parts
        if not any(part.startswith(".") or part in IGNORE_DIRS for part in parts):
            raise BuildError(
                f"Refusing to use {output} as output: it is inside the source tree "
                f"and would be read as content (use {DEFAULT_OUTPUT_DIR} or a path outside {source})"
            )


def _prepare_output(output: Path) -> None:
    """Clear the output directory so stale files don't linger."""
    if output.is_dir():
        shutil.rmtree(output)
    output.mkdir(parents=True, exist_ok=True)


def _render_pages(pages: list[str], ctx: PageContext, jobs: int) -> None:
    if jobs <= 1:
        for page in pages:
            build_page(page, ctx)
        return

    with ThreadPoolExecutor(max_workers=jobs) as executor:
        futures = {executor.submit(build_page, page, ctx): page for page in pages}
        try:
            for future in as_completed(futures):
                future.result()
        except Exception:
            # Pages not yet started are dropped; running ones finish
            executor.shutdown(wait=True, cancel_futures=True)
            raise


def build_site(
    source_root: str | Path,
    output_dir: str | Path | None = None,
    config_path: str | Path | None = None,
    template_dir: str | Path | None = None,
    jobs: int = 1,
) -> list[str]:
    """Run the full build pipeline.

    Args:
        source_root:  Root of the markdown content tree.
        output_dir:   Output directory (default: <source_root>/_site).
        config_path:  Config file (default: <source_root>/.render/config.yml).
        template_dir: Template directory (default: <source_root>/.render/template);
                      missing files fall back to the packaged templates.
        jobs:         Number of pages rendered concurrently.

    Returns:
        The tree-relative output paths of every rendered page.

    Raises:
        SiteBuildError: on any fatal configuration or build problem.
    """
    source = Path(source_root).resolve()
    if not source.is_dir():
        raise BuildError(f"'{source_root}' is not a valid directory.")

    output = Path(output_dir).resolve() if output_dir else source / DEFAULT_OUTPUT_DIR
    config_file = Path(config_path) if config_path else source / RENDER_DIR / DEFAULT_CONFIG_NAME
    templates = Path(template_dir) if template_dir else source / RENDER_DIR / DEFAULT_TEMPLATE_DIR
    _check_output_location(source, output)

    # --- Step 1: Config ---
    print(f"[1/4] Loading config from: {config_file}")
    config = load_config(config_file, source)
    ctx = BuildContext(source_root=source, output_root=output, home_basename=config.home_basename)

    # --- Step 2: Discovery ---
    print(f"[2/4] Scanning content in: {source}")
    manifest = discover(ctx)
    outputs = check_output_collisions(manifest.pages, ctx.home_basename)
    print(f"  [content] {len(manifest.pages)} page(s), {len(manifest.static_files)} static file(s)")
    if SITE_ROOT_ARTIFACT not in outputs:
        print(f"  [warn] no page renders to {SITE_ROOT_ARTIFACT} (home_md is {config.home_md}); "
              f"add README.md or index.md at the content root or the site-title link is broken")

    # --- Step 3: Shared assets ---
    print(f"[3/4] Preparing output: {output}")
    _prepare_output(output)
    theme = load_theme(templates)
    stylesheet_path = copy_stylesheet(theme.stylesheet, output)
    print(f"  [style] {theme.stylesheet} → {stylesheet_path}")
    nav = build_nav(config, ctx)
    print(f"  [nav] {len(nav)} entr{'y' if len(nav) == 1 else 'ies'} resolved.")
    copy_static_files(manifest, ctx)

    # --- Step 4: Pages ---
    print(f"[4/4] Rendering pages → HTML")
    page_ctx = PageContext(
        build=ctx,
        config=config,
        theme=theme,
        nav=tuple(nav),
        stylesheet_path=stylesheet_path,
    )
    _render_pages(manifest.pages, page_ctx, jobs)

    print(f"Output: {output}")
    return sorted(outputs)


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------

def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(
        description="Build a static site from a tree of markdown files."
    )
    ap.add_argument(
        "source",
        nargs="?",
        default=".",
        help="Root of the markdown content tree (default: current directory).",
    )
    ap.add_argument(
        "-o", "--output",
        default=None,
        help=f"Output directory (default: <source>/{DEFAULT_OUTPUT_DIR}).",
    )
    ap.add_argument(
        "-c", "--config",
        default=None,
        help=f"Config file (default: <source>/{RENDER_DIR}/{DEFAULT_CONFIG_NAME}).",
    )
    ap.add_argument(
        "-t", "--templates",
        default=None,
        metavar="DIR",
        help=f"Template directory with index.html, nav.html and style.css "
             f"(default: <source>/{RENDER_DIR}/{DEFAULT_TEMPLATE_DIR}).",
    )
    ap.add_argument(
        "-j", "--jobs",
        type=int,
        default=1,
        help="Number of pages to render concurrently (default: 1).",
    )

    args = ap.parse_args(argv)
    if args.jobs < 1:
        ap.error("--jobs must be at least 1")

    try:
        build_site(
            args.source,
            output_dir=args.output,
            config_path=args.config,
            template_dir=args.templates,
            jobs=args.jobs,
        )
    except SiteBuildError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    print("Done.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
