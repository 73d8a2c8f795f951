"""Core markdown renderer wrapping patitas."""

from patitas import Markdown


class MarkdownRenderer:
    """Render Markdown source to HTML via patitas.

    Wraps ``patitas.Markdown`` with a stable interface that problemdocs
    controls. Rendering is total: malformed Markdown still produces
    best-effort HTML.

    Args:
        plugins: Patitas plugins to enable (default: all).
        highlight: Enable syntax highlighting for fenced code blocks.
    """

    def __init__(
        self,
        *,
        plugins: list[str] | tuple[str, ...] | None = None,
        highlight: bool = False,
    ) -> None:
        self._md = Markdown(plugins=list(plugins or ["all"]), highlight=highlight)

    def render(self, source: str | bytes) -> str:
        """Render Markdown source to an HTML string.

        Args:
            source: Raw Markdown text. Bytes are decoded as UTF-8, with
                undecodable sequences replaced.

        Returns:
            Rendered HTML.
        """
        if isinstance(source, bytes):
            source = source.decode("utf-8", errors="replace")
        if not source:
            return ""
        return self._md(source)
