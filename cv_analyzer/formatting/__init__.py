from .formatter import (
    COMPLETED_RESULT_HTML,
    EMPTY_RESULT_HTML,
    escape_html,
    format_analysis,
    render_inline,
)

__all__ = [
    "COMPLETED_RESULT_HTML",
    "EMPTY_RESULT_HTML",
    "escape_html",
    "format_analysis",
    "render_inline",
]
