from __future__ import annotations

"""HTML rendering for collections and their light answer markup."""

import html
import re

from qabook.collection.types import Collection, Entry, Section, is_closing_fence, match_fence
from qabook.loaders.text import slugify
from qabook.render.options import RenderOptions

_BULLET_RE = re.compile(r"^\s*[-*+]\s+(?P<text>.*)$")
_NUMBERED_RE = re.compile(r"^\s*\d+[.)]\s+(?P<text>.*)$")
_HEADING_RE = re.compile(r"^ {0,3}(?P<hashes>#{1,6})\s+(?P<text>.*?)\s*#*\s*$")
_CODE_SPAN_RE = re.compile(r"`(?P<code>[^`]+)`")
_BOLD_RE = re.compile(r"\*\*(?P<text>.+?)\*\*")

_STYLE = """
body { font-family: sans-serif; max-width: 50rem; margin: 2rem auto; line-height: 1.5; }
pre { background: #f5f5f5; padding: 0.75rem; overflow-x: auto; }
code { font-family: monospace; }
ul.tags { list-style: none; padding: 0; }
ul.tags li { display: inline-block; margin-right: 0.5rem; font-size: 0.85rem; color: #555; }
""".strip()


def render_html(collection: Collection, options: RenderOptions | None = None) -> str:
    """Render a collection as one self-contained HTML5 document."""
    options = options or RenderOptions()
    title = options.resolve_title(collection.title)
    anchors = _section_anchors(collection.sections)

    lines = [
        "<!DOCTYPE html>",
        '<html lang="en">',
        "<head>",
        '<meta charset="utf-8">',
        f"<title>{_escape(title or 'Questions and Answers')}</title>",
        f"<style>\n{_STYLE}\n</style>",
        "</head>",
        "<body>",
    ]
    if title:
        lines.append(f'<h1 class="title">{_escape(title)}</h1>')
    if options.toc:
        lines.extend(_toc(collection.sections, anchors))
    for section, anchor in zip(collection.sections, anchors):
        lines.extend(_section(section, anchor, options))
    lines.extend(["</body>", "</html>"])
    return "\n".join(lines) + "\n"


def _section_anchors(sections: tuple[Section, ...]) -> list[str]:
    """Build unique anchors for sections, which may share names."""
    return [
        f"section-{index}-{slugify(section.name)}".rstrip("-")
        for index, section in enumerate(sections, start=1)
    ]


def _toc(sections: tuple[Section, ...], anchors: list[str]) -> list[str]:
    lines = ['<nav class="toc">', "<ol>"]
    for section, anchor in zip(sections, anchors):
        lines.append(f'<li><a href="#{_attr(anchor)}">{_escape(section.name)}</a>')
        if section.entries:
            lines.append("<ol>")
            for entry in section.entries:
                lines.append(
                    f'<li><a href="#{_attr(entry.id)}">{_escape(entry.question)}</a></li>'
                )
            lines.append("</ol>")
        lines.append("</li>")
    lines.extend(["</ol>", "</nav>"])
    return lines


def _section(section: Section, anchor: str, options: RenderOptions) -> list[str]:
    lines = [f'<section id="{_attr(anchor)}">', f"<h2>{_escape(section.name)}</h2>"]
    if section.intro:
        lines.append(answer_to_html(section.intro))
    for entry in section.entries:
        lines.extend(_entry(entry, options))
    lines.append("</section>")
    return lines


def _entry(entry: Entry, options: RenderOptions) -> list[str]:
    lines = [
        f'<article id="{_attr(entry.id)}">',
        f"<h3>{_escape(entry.question)}</h3>",
        answer_to_html(entry.answer),
    ]
    if options.include_tags and entry.tags:
        items = "".join(f"<li>{_escape(tag)}</li>" for tag in entry.tags)
        lines.append(f'<ul class="tags">{items}</ul>')
    lines.append("</article>")
    return lines


def answer_to_html(text: str) -> str:
    """Convert answer markup into HTML blocks.

    Supports paragraphs, bullet and numbered lists, fenced code blocks,
    nested headings, inline code spans and bold text. Everything else is
    escaped and kept as paragraph text.
    """
    blocks: list[str] = []
    paragraph: list[str] = []
    list_tag: str | None = None
    items: list[str] = []
    code_lines: list[str] = []
    fence: str | None = None
    language = ""

    def flush_paragraph() -> None:
        if paragraph:
            blocks.append(f"<p>{_inline(' '.join(line.strip() for line in paragraph))}</p>")
            paragraph.clear()

    def flush_list() -> None:
        nonlocal list_tag
        if list_tag:
            body = "".join(f"<li>{_inline(item)}</li>" for item in items)
            blocks.append(f"<{list_tag}>{body}</{list_tag}>")
            items.clear()
            list_tag = None

    for line in text.split("\n"):
        if fence is not None:
            if is_closing_fence(line, fence):
                css = f' class="language-{_attr(language)}"' if language else ""
                code = html.escape("\n".join(code_lines), quote=False)
                blocks.append(f"<pre><code{css}>{code}</code></pre>")
                fence = None
                code_lines = []
            else:
                code_lines.append(line)
            continue

        fence_match = match_fence(line)
        if fence_match:
            flush_paragraph()
            flush_list()
            fence = fence_match.group("fence")
            language = fence_match.group("info").strip().split(" ", 1)[0]
            continue

        if not line.strip():
            flush_paragraph()
            flush_list()
            continue

        heading = _HEADING_RE.match(line)
        if heading:
            flush_paragraph()
            flush_list()
            level = min(6, len(heading.group("hashes")) + 1)
            blocks.append(f"<h{level}>{_inline(heading.group('text'))}</h{level}>")
            continue

        bullet = _BULLET_RE.match(line)
        numbered = None if bullet else _NUMBERED_RE.match(line)
        if bullet or numbered:
            tag = "ul" if bullet else "ol"
            flush_paragraph()
            if list_tag != tag:
                flush_list()
                list_tag = tag
            items.append((bullet or numbered).group("text"))
            continue

        if list_tag and line[:1].isspace():
            items[-1] = f"{items[-1]} {line.strip()}"
            continue

        flush_list()
        paragraph.append(line)

    if fence is not None:
        code = html.escape("\n".join(code_lines), quote=False)
        blocks.append(f"<pre><code>{code}</code></pre>")
    flush_paragraph()
    flush_list()
    return "\n".join(blocks)


def _inline(text: str) -> str:
    """Escape text and apply inline code spans and bold markup."""
    parts: list[str] = []
    position = 0
    for match in _CODE_SPAN_RE.finditer(text):
        parts.append(_emphasis(text[position : match.start()]))
        parts.append(f"<code>{html.escape(match.group('code'), quote=False)}</code>")
        position = match.end()
    parts.append(_emphasis(text[position:]))
    return "".join(parts)


def _emphasis(text: str) -> str:
    return _BOLD_RE.sub(r"<strong>\g<text></strong>", html.escape(text, quote=False))


def _escape(text: str) -> str:
    return html.escape(text, quote=False)


def _attr(value: str) -> str:
    return html.escape(value, quote=True)
