"""
Markdown rendering for guides and project write-ups.

Headings get stable ids while rendering, and the table of contents is built
from the same token stream so every TOC link has a matching anchor.
"""
import re
from dataclasses import dataclass, field
from typing import Dict, List

from markdown_it import MarkdownIt

TOC_LIMIT = 25
TOC_LEVELS = ("h2", "h3")

EMOJI_RE = re.compile(
    "["
    "\u2300-\u23FF"  # misc technical
    "\u2600-\u27BF"  # misc symbols, dingbats
    "\u2B00-\u2BFF"
    "\uFE0F\u200D"  # variation selector, joiner
    "\U0001F000-\U0001FAFF"  # pictographs, symbols, flags
    "]+"
)
TITLE_RE = re.compile(r"^#[ \t]+.+\n*")
NON_ALNUM_RE = re.compile(r"[^a-z0-9]+")


def strip_emoji(text: str) -> str:
    return re.sub(r"\s{2,}", " ", EMOJI_RE.sub("", text)).strip()


def heading_id(text: str) -> str:
    """``"Pods & Services"`` -> ``"pods-services"``."""
    return NON_ALNUM_RE.sub("-", strip_emoji(text).lower()).strip("-")


def strip_title(content: str) -> str:
    """Drop the leading H1; pages render the title themselves."""
    return TITLE_RE.sub("", content.lstrip("\ufeff"), count=1)


class HeadingSlugger:
    """Hands out unique heading ids, suffixing repeats with -1, -2, ..."""

    def __init__(self):
        self.seen: Dict[str, int] = {}

    def slug(self, text: str) -> str:
        base = heading_id(text) or "section"
        count = self.seen.get(base, 0)
        self.seen[base] = count + 1
        return base if count == 0 else f"{base}-{count}"


@dataclass
class TocEntry:
    level: int
    text: str
    id: str


@dataclass
class RenderedDocument:
    html: str
    toc: List[TocEntry] = field(default_factory=list)
    total_headings: int = 0

    @property
    def hidden_headings(self) -> int:
        return max(self.total_headings - len(self.toc), 0)


def _render_link_open(self, tokens, idx, options, env):
    token = tokens[idx]
    href = token.attrGet("href") or ""
    if href.startswith(("http://", "https://")):
        token.attrSet("target", "_blank")
        token.attrSet("rel", "noopener noreferrer")
    return self.renderToken(tokens, idx, options, env)


def build_parser() -> MarkdownIt:
    md = MarkdownIt("commonmark", {"html": False}).enable(["table", "strikethrough"])
    md.add_render_rule("link_open", _render_link_open)
    return md


_parser = build_parser()


def _inline_text(token) -> str:
    if not token.children:
        return token.content
    return "".join(
        child.content for child in token.children if child.type in ("text", "code_inline")
    )


def render_markdown(content: str, strip_leading_title: bool = True) -> RenderedDocument:
    body = strip_title(content) if strip_leading_title else content
    tokens = _parser.parse(body)

    slugger = HeadingSlugger()
    toc: List[TocEntry] = []
    total = 0
    for i, token in enumerate(tokens):
        if token.type != "heading_open":
            continue
        text = strip_emoji(_inline_text(tokens[i + 1]))
        anchor = slugger.slug(text)
        token.attrSet("id", anchor)
        if token.tag in TOC_LEVELS:
            total += 1
            if len(toc) < TOC_LIMIT:
                toc.append(TocEntry(level=int(token.tag[1]), text=text, id=anchor))

    html = _parser.renderer.render(tokens, _parser.options, {})
    return RenderedDocument(html=html, toc=toc, total_headings=total)


def extract_toc(content: str) -> List[TocEntry]:
    return render_markdown(content).toc
