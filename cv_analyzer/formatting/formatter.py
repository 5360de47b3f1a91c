"""Render LLM analysis text as an HTML fragment.

The input is markdown-flavoured text that may use the conventions requested by
the analysis prompt: numbered section titles, ``Priority:`` issue blocks,
``Before/After`` rewrite blocks and labeled ``What Works`` style bullets.
Every line is HTML-escaped before any tag is produced, so the model's text can
never inject markup of its own.
"""

from __future__ import annotations

import html
import re
from dataclasses import dataclass, field
from typing import Union

EMPTY_RESULT_HTML = "<p>No analysis results available.</p>"
COMPLETED_RESULT_HTML = "<p>Analysis completed successfully.</p>"

# glyph -> (css class, display label)
PRIORITY_LEVELS: dict[str, tuple[str, str]] = {
    "🔴": ("critical", "Critical"),
    "🟡": ("important", "Important"),
    "🟢": ("optional", "Optional"),
}

# label -> (css class, glyph)
FEEDBACK_KINDS: dict[str, tuple[str, str]] = {
    "What Works": ("works", "✅"),
    "What Doesn't": ("doesnt", "❌"),
    "How to Fix": ("fix", "🔧"),
}

NUMBERED_HEADER_RE = re.compile(r"^(\d+)\.\s+(\S.*)$")
PRIORITY_RE = re.compile(r"^Priority:\s*(🔴|🟡|🟢)\ufe0f?\s*(.*)$")
PRIORITY_ENTRY_RE = re.compile(r"^[-*•]\s*(Problem|Impact|Solution):\s*(.*)$")
BEFORE_RE = re.compile(r"^❌\ufe0f?\s*Before:\s*(.*)$")
AFTER_RE = re.compile(r"^✅\ufe0f?\s*After:\s*(.*)$")
WHY_RE = re.compile(r"^Why this is better:\s*(.*)$")
FEEDBACK_RE = re.compile(r"^[-*•]\s*(?:✅|❌|🔧)\ufe0f?\s*(What Works|What Doesn['’]t|How to Fix):\s*(.*)$")
MARKDOWN_HEADER_RE = re.compile(r"^(#{2,3})\s+(.+)$")
BULLET_RE = re.compile(r"^[-*•]\s+(.*)$")
NUMBERED_ITEM_RE = re.compile(r"^\d+[.)]\s+(.*)$")

CODE_RE = re.compile(r"`([^`]+)`")
BOLD_RE = re.compile(r"\*\*(.+?)\*\*")
ITALIC_RE = re.compile(r"(?<![*\w])\*(?![\s*])(.+?)(?<![\s*])\*(?![*\w])")


def escape_html(text: str) -> str:
    return html.escape(text, quote=False)


def render_inline(text: str) -> str:
    """Apply ``**bold**``, ``*italic*`` and ```code``` to already-escaped text."""
    parts = CODE_RE.split(text)
    rendered: list[str] = []
    for index, part in enumerate(parts):
        if index % 2:
            rendered.append(f"<code>{part}</code>")
            continue
        part = BOLD_RE.sub(r"<strong>\1</strong>", part)
        part = ITALIC_RE.sub(r"<em>\1</em>", part)
        rendered.append(part)
    return "".join(rendered)


def _title_is_uppercase_led(title: str) -> bool:
    # Emphasis markers may wrap the title: "1. **ATS Score**".
    bare = title.lstrip("*_`")
    return bool(bare) and bare[0].isupper()


def _labeled(css_class: str, label: str, text: str) -> str:
    return f'<div class="{css_class}"><span class="entry-label">{label}</span> {render_inline(text)}</div>'


@dataclass
class _PriorityBlock:
    glyph: str
    caption: str
    entries: list[tuple[str, str]] = field(default_factory=list)

    @property
    def severity(self) -> str:
        return PRIORITY_LEVELS[self.glyph][0]

    def render(self) -> str:
        caption = self.caption or PRIORITY_LEVELS[self.glyph][1]
        parts = [
            f'<div class="priority-item {self.severity}">',
            f'<div class="priority-badge">{self.glyph} {render_inline(caption)}</div>',
        ]
        parts.extend(_labeled("priority-entry", f"{label}:", text) for label, text in self.entries)
        parts.append("</div>")
        return "".join(parts)


@dataclass
class _BeforeAfterBlock:
    phase: str = "before"
    parts: list[str] = field(default_factory=list)

    def render(self) -> str:
        return '<div class="before-after">' + "".join(self.parts) + "</div>"


_Block = Union[_PriorityBlock, _BeforeAfterBlock]


@dataclass(frozen=True)
class _Fragment:
    kind: str  # "block", "ul", "ol" or "break"
    html: str = ""


class _AnalysisRenderer:
    """Single-pass line classifier.

    ``self.block`` is the state: ``None`` (idle), a ``_PriorityBlock`` or a
    ``_BeforeAfterBlock`` whose ``phase`` is ``before`` or ``after``.
    """

    def __init__(self) -> None:
        self.block: _Block | None = None
        self.fragments: list[_Fragment] = []

    def emit(self, markup: str, kind: str = "block") -> None:
        self.fragments.append(_Fragment(kind, markup))

    def flush(self) -> None:
        if self.block is not None:
            self.emit(self.block.render())
            self.block = None

    def feed(self, line: str) -> None:
        if not line:
            self.flush()
            self.emit("", kind="break")
            return

        if self._continue_block(line):
            return
        self.flush()

        match = NUMBERED_HEADER_RE.match(line)
        if match and _title_is_uppercase_led(match.group(2)):
            self.emit(f'<h2 class="section-header">{render_inline(line)}</h2>')
            return

        match = PRIORITY_RE.match(line)
        if match:
            self.block = _PriorityBlock(glyph=match.group(1), caption=match.group(2).strip())
            return

        match = PRIORITY_ENTRY_RE.match(line)
        if match:
            self.emit(_labeled("priority-entry", f"{match.group(1)}:", match.group(2)))
            return

        match = BEFORE_RE.match(line)
        if match:
            self.block = _BeforeAfterBlock()
            self.block.parts.append(_labeled("before", "❌ Before:", match.group(1)))
            return

        if AFTER_RE.match(line):
            # An "After" with nothing to contrast against is dropped.
            return

        match = FEEDBACK_RE.match(line)
        if match:
            label = match.group(1).replace("’", "'")
            css_class, glyph = FEEDBACK_KINDS[label]
            self.emit(_labeled(f"feedback-item {css_class}", f"{glyph} {label}:", match.group(2)))
            return

        match = MARKDOWN_HEADER_RE.match(line)
        if match:
            level = len(match.group(1))
            self.emit(f"<h{level}>{render_inline(match.group(2).strip())}</h{level}>")
            return

        match = BULLET_RE.match(line)
        if match:
            self.emit(f"<li>{render_inline(match.group(1))}</li>", kind="ul")
            return

        match = NUMBERED_ITEM_RE.match(line)
        if match:
            self.emit(f"<li>{render_inline(match.group(1))}</li>", kind="ol")
            return

        self.emit(f"<p>{render_inline(line)}</p>")

    def _continue_block(self, line: str) -> bool:
        """Offer ``line`` to the open block; False means the block must close."""
        block = self.block
        if isinstance(block, _PriorityBlock):
            match = PRIORITY_ENTRY_RE.match(line)
            if match:
                block.entries.append((match.group(1), match.group(2)))
                return True
            return False

        if isinstance(block, _BeforeAfterBlock):
            match = AFTER_RE.match(line)
            if match:
                block.parts.append(_labeled("after", "✅ After:", match.group(1)))
                block.phase = "after"
                return True
            match = WHY_RE.match(line)
            if match and block.phase == "after":
                block.parts.append(_labeled("why-better", "Why this is better:", match.group(1)))
                self.flush()
                return True
        return False

    def finish(self) -> str:
        self.flush()
        return _wrap_lists(self.fragments)


def _wrap_lists(fragments: list[_Fragment]) -> str:
    output: list[str] = []
    run_kind: str | None = None
    run: list[str] = []

    def close_run() -> None:
        if run_kind is not None and run:
            output.append(f"<{run_kind}>{''.join(run)}</{run_kind}>")
        run.clear()

    for fragment in fragments:
        if fragment.kind in {"ul", "ol"}:
            if fragment.kind != run_kind:
                close_run()
                run_kind = fragment.kind
            run.append(fragment.html)
            continue
        close_run()
        run_kind = None
        if fragment.kind == "block":
            output.append(fragment.html)
    close_run()
    return "\n".join(output)


def format_analysis(text: str | None) -> str:
    """Convert analysis text into an HTML fragment. Never raises."""
    if not text or not text.strip():
        return EMPTY_RESULT_HTML

    renderer = _AnalysisRenderer()
    for raw_line in text.splitlines():
        renderer.feed(escape_html(raw_line.strip()))
    return renderer.finish() or COMPLETED_RESULT_HTML
