from pathlib import Path

import pytest

from md2site.resolver import BuildContext


def write(root: Path, rel: str, text: str | bytes) -> Path:
    path = root / rel
    path.parent.mkdir(parents=True, exist_ok=True)
    if isinstance(text, bytes):
        path.write_bytes(text)
    else:
        path.write_text(text, encoding="utf-8")
    return path


@pytest.fixture
def site(tmp_path):
    """A content tree with a config, two pages and an image."""
    root = tmp_path / "content"
    write(root, ".render/config.yml", (
        "site_title: Test Site\n"
        "home_md: README.md\n"
        "nav:\n"
        "  - About: about.md\n"
        "  - Source: https://example.com/repo\n"
    ))
    write(root, "README.md", "# Welcome\n\nHello.\n")
    write(root, "about.md", "# About us\n\n![logo](logo.png)\n")
    write(root, "logo.png", b"\x89PNG fake")
    return root


@pytest.fixture
def ctx(site):
    return BuildContext(source_root=site.resolve(), output_root=(site / "_site").resolve())
