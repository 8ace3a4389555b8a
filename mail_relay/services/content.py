"""
Readable body extraction for parsed emails.

Plain text is preferred. HTML is converted to wrapped plain text with
BeautifulSoup when no plain text part exists.
"""

import re
import textwrap

from bs4 import BeautifulSoup, NavigableString

NO_CONTENT = "(No text content found)"
WRAP_WIDTH = 130

SKIP_TAGS = ["head", "title", "script", "style", "noscript", "img"]
BLOCK_TAGS = [
    "address", "article", "aside", "blockquote", "dd", "div", "dl", "dt",
    "footer", "h1", "h2", "h3", "h4", "h5", "h6", "header", "hr", "li",
    "ol", "p", "section", "table", "tr", "ul",
]
CELL_TAGS = ["td", "th"]

_SCHEME_RE = re.compile(r"^(?:https?://|mailto:)", re.IGNORECASE)
_WHITESPACE_RE = re.compile(r"\s+")
_PRE_MARKER = "\x00pre{}\x00"
_PRE_MARKER_RE = re.compile(r"\x00pre(\d+)\x00")


def _normalize_link(value: str) -> str:
    return _SCHEME_RE.sub("", value.strip()).rstrip("/").lower()


def _href_same_as_text(href: str, text: str) -> bool:
    """Check if a link's href only repeats its visible text."""
    return href == text or _normalize_link(href) == _normalize_link(text)


def html_to_text(html: str, wrap_width: int = WRAP_WIDTH) -> str:
    """
    Convert an HTML body to plain text.

    Images are skipped without a placeholder. Links render as
    ``text [href]`` unless the href just repeats the text. Paragraphs are
    wrapped at ``wrap_width`` columns.

    Args:
        html: HTML document or fragment
        wrap_width: Column to wrap lines at

    Returns:
        Plain text, stripped of surrounding whitespace
    """
    soup = BeautifulSoup(html, "html.parser")

    for tag in soup.find_all(SKIP_TAGS):
        if not tag.decomposed:
            tag.decompose()

    for anchor in soup.find_all("a"):
        if anchor.parent is None:
            continue
        text = anchor.get_text(" ", strip=True)
        href = (anchor.get("href") or "").strip()
        if not href or _href_same_as_text(href, text):
            anchor.replace_with(text)
        elif text:
            anchor.replace_with(f"{text} [{href}]")
        else:
            anchor.replace_with(f"[{href}]")

    # <pre> keeps its layout; swap it for a marker restored after wrapping
    preformatted: list[str] = []
    for pre in soup.find_all("pre"):
        if pre.find_parent("pre") is not None:
            continue
        for br in pre.find_all("br"):
            br.replace_with("\n")
        preformatted.append(pre.get_text())
        placeholder = soup.new_tag("div")
        placeholder.string = _PRE_MARKER.format(len(preformatted) - 1)
        pre.replace_with(placeholder)

    # Source newlines are not line breaks; only tags produce those
    for string in soup.find_all(string=True):
        if type(string) is NavigableString:
            string.replace_with(_WHITESPACE_RE.sub(" ", string))

    for br in soup.find_all("br"):
        br.replace_with("\n")
    for tag in soup.find_all(CELL_TAGS):
        tag.insert_after(" ")
    for tag in soup.find_all(BLOCK_TAGS):
        tag.insert_before("\n")
        tag.insert_after("\n")

    lines: list[str] = []
    for paragraph in soup.get_text().split("\n"):
        paragraph = " ".join(paragraph.split())
        marker = _PRE_MARKER_RE.fullmatch(paragraph)
        if marker and int(marker.group(1)) < len(preformatted):
            block = preformatted[int(marker.group(1))].strip("\n")
            lines.extend(line.rstrip() for line in block.splitlines())
            continue
        if not paragraph:
            # Collapse runs of blank lines into one
            if lines and lines[-1]:
                lines.append("")
            continue
        lines.extend(
            textwrap.wrap(
                paragraph,
                width=wrap_width,
                break_long_words=False,
                break_on_hyphens=False,
            )
        )

    return "\n".join(lines).strip()


def extract_body(plain_text: str | None = None, html: str | None = None) -> str:
    """
    Get a readable body, preferring plain text over converted HTML.

    Returns the fallback marker when neither part yields any text.
    """
    body = plain_text
    if not body and html:
        body = html_to_text(html)

    if not body:
        return NO_CONTENT

    return body.strip()
