"""
Content discovery for the site builder.

Walks the source tree and sorts every file into one of two buckets:

  1. Pages — files with the content extension (.md), rendered to HTML.
  2. Static files — everything else, copied verbatim to the same relative
     path under the output directory.

Hidden entries (dot-prefixed), build/tool directories and the output
directory itself are ignored.
"""

import shutil
from dataclasses import dataclass, field
from pathlib import Path

from md2site.errors import BuildError
from md2site.resolver import BuildContext, is_content_file, resolve


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

IGNORE_DIRS = {"_site", "node_modules", "__pycache__"}
IGNORE_FILES = {"Thumbs.db"}


@dataclass
class SiteManifest:
    """Tree-relative POSIX paths of everything the build will emit."""

    pages: list[str] = field(default_factory=list)
    static_files: list[str] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def should_ignore(path: Path) -> bool:
    """Check if a file or directory should be ignored."""
    if path.name.startswith("."):
        return True
    if path.name in IGNORE_FILES:
        return True
    if path.is_dir() and path.name in IGNORE_DIRS:
        return True
    return False


def _walk(directory: Path, ctx: BuildContext, manifest: SiteManifest) -> None:
    entries = sorted(directory.iterdir(), key=lambda e: (not e.is_dir(), e.name.lower()))

    for entry in entries:
        if should_ignore(entry):
            continue

        if entry.is_dir():
            if entry.resolve() == ctx.output_root:
                continue
            _walk(entry, ctx, manifest)
            continue

        if not entry.is_file():
            continue

        rel = entry.relative_to(ctx.source_root).as_posix()
        if is_content_file(entry.name):
            manifest.pages.append(rel)
        else:
            manifest.static_files.append(rel)


# ---------------------------------------------------------------------------
# Public entry points
# ---------------------------------------------------------------------------

def discover(ctx: BuildContext) -> SiteManifest:
    """Walk ``ctx.source_root`` and collect pages and static files."""
    manifest = SiteManifest()
    _walk(ctx.source_root, ctx, manifest)
    return manifest


def check_output_collisions(pages: list[str], home_basename: str) -> dict[str, str]:
    """Map every page to its output path, failing on duplicates.

    e.g. ``foo.md`` and ``foo/index.md`` both resolve to ``foo/index.html``.

    Returns:
        {output_path: source_path}
    """
    seen: dict[str, str] = {}
    for page in pages:
        output = resolve(page, home_basename)
        if output in seen:
            raise BuildError(
                f"Output collision: {seen[output]} and {page} both render to {output}"
            )
        seen[output] = page
    return seen


def copy_static_files(manifest: SiteManifest, ctx: BuildContext) -> None:
    """Copy non-content files to the same relative path in the output tree."""
    for rel in manifest.static_files:
        src_file = ctx.source_root / rel
        dst_file = ctx.output_file(rel)
        dst_file.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(src_file, dst_file)

    print(f"  [static] {len(manifest.static_files)} file(s) copied.")
