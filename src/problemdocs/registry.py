"""Problem registry: register titles once, emit problems many times.

Mutable during setup (each registration installs a documentation route
and a problem handler). Read-only in practice once traffic starts.

Thread safety:
    Registrations are serialized by a Lock and publish a fresh handler
    mapping (copy-on-write), so a concurrent ``lookup()`` sees either the
    mapping before or after a registration, never one in between.
"""

import logging
import posixpath
import threading
from dataclasses import dataclass, replace
from urllib.parse import quote, urlsplit, urlunsplit

from problemdocs._internal.asgi import PATH_SEGMENT_SAFE, Receive, Scope, Send
from problemdocs.config import PROBLEM_CONTENT_TYPE, RegistryConfig
from problemdocs.http.response import Response
from problemdocs.markdown.renderer import MarkdownRenderer
from problemdocs.pages import DEFAULT_TEMPLATE, render_markdown, render_raw, render_template
from problemdocs.problem import Extension, ProblemType, problem_response, reason_phrase
from problemdocs.routing.route import Route
from problemdocs.routing.router import Router
from problemdocs.server.handler import handle_request
from problemdocs.server.sender import send_response
from problemdocs.templating.integration import create_environment

logger = logging.getLogger("problemdocs.registry")

_DOC_METHODS = frozenset({"GET", "HEAD"})


def doc_path(title: str) -> str:
    """Route path of the documentation page for *title*.

    ``"Not Found"`` -> ``"/Not%20Found.html"``. Slashes in the title are
    escaped, so every page lives directly under the root.
    """
    return f"/{quote(title, safe=PATH_SEGMENT_SAFE)}.html"


def join_url(base_url: str, path: str) -> str:
    """Join *path* onto the path of *base_url*, posix path-join style.

    ``join_url("https://x.com/errors/", "/A.html")`` ->
    ``"https://x.com/errors/A.html"``. An empty base yields *path*.
    """
    if not base_url:
        return path
    parts = urlsplit(base_url)
    joined = posixpath.normpath(posixpath.join(parts.path or "/", path.lstrip("/")))
    return urlunsplit((parts.scheme, parts.netloc, joined, parts.query, parts.fragment))


@dataclass(frozen=True, slots=True)
class DocPage:
    """Route handler serving one pre-rendered documentation page."""

    title: str
    body: bytes
    content_type: str

    def __call__(self) -> Response:
        return Response(body=self.body, content_type=self.content_type)


@dataclass(frozen=True, slots=True)
class ProblemHandler:
    """Emits problems for one registered title.

    Immutable once created. Keep a reference to skip the registry lookup::

        not_found = registry.doc("Not Found", "The resource does not exist.")
        return not_found(404, "no such user", ext("user_id", 42))
    """

    problem_type: ProblemType
    indent: int = 2
    content_type: str = PROBLEM_CONTENT_TYPE

    @property
    def title(self) -> str:
        return self.problem_type.title

    @property
    def doc_url(self) -> str:
        return self.problem_type.doc_url

    def __call__(self, status: int, detail: str = "", *extensions: Extension) -> Response:
        return problem_response(
            self.problem_type,
            status,
            detail,
            *extensions,
            indent=self.indent,
            content_type=self.content_type,
        )


@dataclass(frozen=True, slots=True)
class Found:
    """Lookup outcome: the title is registered."""

    handler: ProblemHandler


@dataclass(frozen=True, slots=True)
class Missing:
    """Lookup outcome: the title is not registered (or is empty)."""

    title: str


class ProblemRegistry:
    """Registry of problem titles and their documentation pages.

    The registry is also an ASGI application that serves the rendered
    documentation pages. Mount it wherever ``base_url`` points.

    Usage::

        problems = ProblemRegistry("https://api.example.com/problems")
        out_of_credit = problems.doc("Out of Credit", "Top up your account.")

        # in a request handler
        return problems.error("Out of Credit", 403, "balance is 30", ext("balance", 30))
    """

    __slots__ = ("_env", "_handlers", "_lock", "_markdown", "_router", "config")

    def __init__(self, base_url: str = "", *, config: RegistryConfig | None = None) -> None:
        if config is None:
            config = RegistryConfig(base_url=base_url)
        elif base_url:
            config = replace(config, base_url=base_url)
        self.config = config
        self._router = Router()
        self._handlers: dict[str, ProblemHandler] = {}
        self._lock = threading.Lock()
        self._env = create_environment(config)
        self._markdown = MarkdownRenderer(
            plugins=config.markdown_plugins or None,
            highlight=config.markdown_highlight,
        )

    @classmethod
    def from_config(cls, config: RegistryConfig) -> "ProblemRegistry":
        """Create a registry from an explicit configuration."""
        return cls(config=config)

    @property
    def base_url(self) -> str:
        return self.config.base_url

    # -- Registration --

    def doc(self, title: str, description: str) -> ProblemHandler:
        """Register *title* with a page built from the default template.

        Raises:
            TemplateParseError, TemplateExecError: the page could not be
                rendered; nothing was registered.
        """
        return self.template_doc(title, description, DEFAULT_TEMPLATE)

    def template_doc(self, title: str, description: str, source: str) -> ProblemHandler:
        """Register *title* with a page rendered from a kida template.

        The template sees ``Title`` and ``Description``.

        Raises:
            TemplateParseError, TemplateExecError: the page could not be
                rendered; nothing was registered.
        """
        page = render_template(title, description, source, env=self._env)
        return self.register(title, page)

    def markdown_doc(self, title: str, markdown: str | bytes) -> ProblemHandler:
        """Register *title* with a page rendered from Markdown."""
        return self.register(title, render_markdown(title, markdown, renderer=self._markdown))

    def html_doc(self, title: str, html: str | bytes | None) -> ProblemHandler:
        """Register *title* with a caller-supplied HTML page.

        Empty or ``None`` content registers the title without a page.
        """
        return self.register(title, render_raw(title, html) if html else None)

    def register(self, title: str, html: bytes | None = None) -> ProblemHandler:
        """Bind *title* to an optional documentation page and a handler.

        Non-empty *html* installs ``GET /{escaped title}.html`` and fixes
        the problem ``type`` to its absolute URL. Registering a title again
        replaces its handler; the previous page route is replaced only if
        the new registration also supplies a page.
        """
        doc_url = ""
        with self._lock:
            if html:
                path = doc_path(title)
                page = DocPage(title=title, body=html, content_type=self.config.doc_content_type)
                self._router.add(Route(path=path, handler=page, methods=_DOC_METHODS, name=title))
                doc_url = join_url(self.config.base_url, path)

            handler = ProblemHandler(
                ProblemType(title=title, doc_url=doc_url),
                indent=self.config.json_indent,
                content_type=self.config.problem_content_type,
            )
            if title in self._handlers:
                logger.debug("Replacing problem handler for %r", title)
            self._handlers = {**self._handlers, title: handler}

        logger.debug("Registered problem %r (doc: %s)", title, doc_url or "none")
        return handler

    # -- Dispatch --

    def lookup(self, title: str) -> Found | Missing:
        """Find the handler registered for *title*."""
        handler = self._handlers.get(title)
        if handler is None:
            return Missing(title)
        return Found(handler)

    def error(
        self,
        title: str,
        status: int,
        detail: str = "",
        *extensions: Extension,
    ) -> Response:
        """Build the problem Response for *title*.

        Unregistered titles still produce a complete problem, just
        without ``type``. An empty title is replaced by the standard
        reason phrase for *status*.
        """
        match self.lookup(title):
            case Found(handler):
                return handler(status, detail, *extensions)
            case Missing():
                logger.debug("No problem registered for %r; sending untyped problem", title)
                fallback = ProblemType(title=title or reason_phrase(status))
                return problem_response(
                    fallback,
                    status,
                    detail,
                    *extensions,
                    indent=self.config.json_indent,
                    content_type=self.config.problem_content_type,
                )

    async def send_error(
        self,
        send: Send,
        title: str,
        status: int,
        detail: str = "",
        *extensions: Extension,
    ) -> None:
        """Write the problem for *title* straight to an ASGI ``send``."""
        await send_response(self.error(title, status, detail, *extensions), send)

    # -- Introspection --

    def doc_url(self, title: str) -> str:
        """Documentation URL registered for *title*, or ``""``."""
        handler = self._handlers.get(title)
        return handler.doc_url if handler is not None else ""

    @property
    def titles(self) -> list[str]:
        """Registered titles, sorted."""
        return sorted(self._handlers)

    @property
    def routes(self) -> list[Route]:
        """Installed documentation routes, sorted by path."""
        return self._router.routes

    def __contains__(self, title: object) -> bool:
        return title in self._handlers

    def __len__(self) -> int:
        return len(self._handlers)

    # -- ASGI interface --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point serving the documentation pages."""
        if scope["type"] == "lifespan":
            await self._handle_lifespan(receive, send)
            return

        await handle_request(scope, receive, send, router=self._router)

    async def _handle_lifespan(self, receive: Receive, send: Send) -> None:
        """Acknowledge lifespan startup and shutdown; there is nothing to run."""
        while True:
            message = await receive()
            msg_type = message["type"]

            if msg_type == "lifespan.startup":
                await send({"type": "lifespan.startup.complete"})
            elif msg_type == "lifespan.shutdown":
                await send({"type": "lifespan.shutdown.complete"})
                return
