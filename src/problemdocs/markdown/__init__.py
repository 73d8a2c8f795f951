"""Markdown rendering for documentation pages via patitas.

Thin wrapper around patitas so the rest of problemdocs depends on a
stable interface rather than on patitas directly.
"""

from problemdocs.markdown.renderer import MarkdownRenderer

__all__ = ["MarkdownRenderer"]
