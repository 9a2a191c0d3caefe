"""
Markdown rendering for the site builder.

Configures Mistune for GitHub-flavoured markdown and post-processes the
resulting HTML fragment:
- Sanitising (scripts, styles, event handlers, javascript: URLs)
- Deterministic, collision-free heading ids
- First top-level heading lookup for page titles
"""

import html
import re

import mistune
from bs4 import BeautifulSoup
from mistune import escape as escape_text

# ---------------------------------------------------------------------------
# Parser factory
# ---------------------------------------------------------------------------

MARKDOWN_PLUGINS = ["table", "strikethrough", "url", "task_lists"]


def create_parser() -> mistune.Markdown:
    """Create a configured mistune Markdown parser.

    Raw HTML is passed through (``escape=False``) and cleaned afterwards by
    ``sanitize_html``; single newlines become ``<br>``.
    """
    md = mistune.create_markdown(
        escape=False,
        hard_wrap=True,
        plugins=MARKDOWN_PLUGINS,
    )

    # Fenced code keeps its language on both <pre> and <code> for client-side highlighters
    def block_code(code, info=None):
        escaped = escape_text(code)
        if info:
            lang = escape_text(info.split()[0])
            return (
                f'<pre class="language-{lang}">'
                f'<code class="language-{lang}">{escaped}</code></pre>\n'
            )
        return f"<pre><code>{escaped}</code></pre>\n"

    md.renderer.block_code = block_code

    return md


def markdown_to_html(text: str) -> str:
    """Convert a markdown body to a sanitised HTML fragment."""
    md = create_parser()
    return sanitize_html(md(text))


# ---------------------------------------------------------------------------
# Sanitising
# ---------------------------------------------------------------------------

DROP_ELEMENTS = ["script", "style"]
URL_ATTRIBUTES = {"href", "src", "action", "formaction", "poster"}

# Browsers ignore whitespace and control characters inside a URL scheme
_URL_NOISE_RE = re.compile(r"[\x00-\x20]+")


def _is_javascript_url(value) -> bool:
    return _URL_NOISE_RE.sub("", str(value)).lower().startswith("javascript:")


def sanitize_html(fragment: str) -> str:
    """Strip active content from rendered markdown.

    Removes <script>/<style> elements with their content, on* event
    handler attributes and javascript: URLs.  Only the parsed tags are
    touched; text, including escaped markup inside code blocks, is kept
    as written.  Media and iframe embeds are kept.
    """
    soup = BeautifulSoup(fragment, "html.parser")

    for tag in soup.find_all(DROP_ELEMENTS):
        tag.decompose()

    for tag in soup.find_all(True):
        for name in list(tag.attrs):
            key = name.lower()
            if key.startswith("on"):
                del tag[name]
            elif key in URL_ATTRIBUTES and _is_javascript_url(tag[name]):
                tag[name] = "#"

    return str(soup)


# ---------------------------------------------------------------------------
# Heading ids
# ---------------------------------------------------------------------------

HEADING_TAGS = ["h1", "h2", "h3", "h4", "h5", "h6"]
EMPTY_SLUG = "section"


def slugify_heading(text: str) -> str:
    """Convert heading text to a URL-friendly slug for anchor IDs.

    Strips HTML tags, decodes entities, lowercases, drops everything that
    is not a word character, whitespace or hyphen, and collapses whitespace
    runs to a single hyphen.

    e.g. "Practice Problem"    → "practice-problem"
         "What is O(n log n)?" → "what-is-on-log-n"
         "Q&amp;A"             → "qa"
    """
    slug = re.sub(r"<[^>]+>", "", text)
    slug = html.unescape(slug).strip().lower()
    slug = re.sub(r"[^\w\s-]", "", slug)
    slug = re.sub(r"\s+", "-", slug)
    return slug


def assign_heading_ids(fragment: str) -> str:
    """Give every heading in *fragment* a unique ``id`` attribute.

    Headings that already carry an id keep it, and that id is reserved.
    Repeated slugs get a numeric suffix: "overview", "overview-1", ...
    """
    soup = BeautifulSoup(fragment, "html.parser")
    headings = soup.find_all(HEADING_TAGS)

    used = {tag["id"] for tag in soup.find_all(id=True)}
    # Tracks the last suffix handed out per base slug
    counts: dict[str, int] = {}

    for heading in headings:
        if heading.get("id"):
            continue
        base = slugify_heading(heading.decode_contents()) or EMPTY_SLUG
        slug = base
        n = counts.get(base, 0)
        while slug in used:
            n += 1
            slug = f"{base}-{n}"
        counts[base] = n
        used.add(slug)
        heading["id"] = slug

    return str(soup)


# ---------------------------------------------------------------------------
# Titles
# ---------------------------------------------------------------------------

def first_heading_text(fragment: str) -> str | None:
    """Text of the first <h1> in *fragment*, whitespace-collapsed, or None."""
    soup = BeautifulSoup(fragment, "html.parser")
    h1 = soup.find("h1")
    if h1 is None:
        return None
    text = " ".join(h1.get_text().split())
    return text or None
