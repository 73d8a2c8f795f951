"""problemdocs exception hierarchy.

Shared across the registry, renderers, router, and ASGI glue so every
module raises and catches the same types.
"""

from dataclasses import dataclass


class ProblemDocsError(Exception):
    """Base for all problemdocs-specific errors."""


class ConfigurationError(ProblemDocsError):
    """Raised when registry configuration is invalid.

    Typically raised by ``RegistryConfig`` or ``ProblemRegistry`` at setup.
    """


class TemplateError(ProblemDocsError):
    """Base for failures while rendering a templated documentation page."""

    def __init__(self, title: str, message: str) -> None:
        super().__init__(f"{title!r}: {message}")
        self.title = title
        self.message = message


class TemplateParseError(TemplateError):
    """The template source could not be parsed.

    Registration did not complete: no route was installed and no handler
    was stored for the title.
    """


class TemplateExecError(TemplateError):
    """The template parsed but failed while rendering."""


@dataclass(frozen=True, slots=True)
class HTTPError(ProblemDocsError):
    """An error that maps directly to an HTTP status code.

    Raised by the documentation router. The ASGI handler turns these
    into plain-text responses.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class NotFound(HTTPError):  # noqa: N818: conventional name in web frameworks
    """404: no documentation page is installed at the request path."""

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(status=404, detail=detail)


class MethodNotAllowed(HTTPError):  # noqa: N818: conventional name in web frameworks
    """405: a page exists at the path but not for this HTTP method.

    Includes an ``Allow`` header listing the valid methods.
    """

    def __init__(self, allowed: frozenset[str], detail: str = "") -> None:
        allow_value = ", ".join(sorted(allowed))
        default_detail = f"Method not allowed. Allowed methods: {allow_value}"
        super().__init__(
            status=405,
            detail=detail or default_detail,
            headers=(("Allow", allow_value),),
        )
