"""Documentation page rendering.

Three ways to turn a problem title into a complete HTML document:

- ``render_template``: a kida template with ``Title`` and ``Description``
- ``render_markdown``: Markdown wrapped in a minimal HTML shell
- ``render_raw``: caller-supplied HTML, unchanged

All three are pure and return UTF-8 bytes ready to be served.
"""

import html

from kida import Environment

from problemdocs.markdown.renderer import MarkdownRenderer
from problemdocs.templating.integration import create_environment, render_doc_template

DEFAULT_TEMPLATE = """<html>
  <head>
    <meta charset="utf-8">
    <title>Error {{ Title }}</title>
  </head>
  <body>
    <h1>{{ Title }}</h1>
    <pre>{{ Description }}</pre>
  </body>
</html>"""

_MARKDOWN_SHELL = """<html>
<head>
  <meta charset="utf-8">
  <title>Error {title}</title>
</head>
<body>
{content}</body>
</html>"""


def render_template(
    title: str,
    description: str,
    source: str = DEFAULT_TEMPLATE,
    *,
    env: Environment | None = None,
) -> bytes:
    """Render a templated documentation page.

    Raises:
        TemplateParseError: *source* is malformed.
        TemplateExecError: rendering the template failed.
    """
    env = env or create_environment()
    return render_doc_template(env, source, title, description).encode("utf-8")


def render_markdown(
    title: str,
    source: str | bytes,
    *,
    renderer: MarkdownRenderer | None = None,
) -> bytes:
    """Render Markdown into a minimal HTML page titled after *title*."""
    renderer = renderer or MarkdownRenderer()
    page = _MARKDOWN_SHELL.format(
        title=html.escape(title, quote=False),
        content=renderer.render(source),
    )
    return page.encode("utf-8")


def render_raw(title: str, content: str | bytes) -> bytes:  # noqa: ARG001
    """Return caller-supplied HTML unchanged. *title* only names the route."""
    if isinstance(content, str):
        return content.encode("utf-8")
    return content
