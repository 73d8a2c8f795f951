"""problemdocs: RFC 7807 problem details with published documentation.

Register each kind of error once, then emit consistent problem bodies
whose ``type`` links to a human-readable page served by the registry.

Basic usage::

    from problemdocs import ProblemRegistry, ext

    problems = ProblemRegistry("https://api.example.com/problems")
    problems.doc("Out of Credit", "Your balance is too low for this call.")
    problems.markdown_doc("Rate Limited", b"# Rate limited\\n\\nSlow down.")

    # in a request handler
    response = problems.error("Out of Credit", 403, "balance is 30", ext("balance", 30))

The registry is itself an ASGI app serving ``/Out%20of%20Credit.html``
and friends; mount it where the base URL points.
"""

__version__ = "0.1.0"
__all__ = [
    "DEFAULT_TEMPLATE",
    "ConfigurationError",
    "Extension",
    "Found",
    "HTTPError",
    "MethodNotAllowed",
    "Missing",
    "NotFound",
    "ProblemDocsError",
    "ProblemHandler",
    "ProblemRegistry",
    "ProblemType",
    "RegistryConfig",
    "Response",
    "TemplateError",
    "TemplateExecError",
    "TemplateParseError",
    "ext",
    "render_markdown",
    "render_raw",
    "render_template",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import problemdocs`` fast while providing a clean top-level API.
    """
    if name in ("ProblemRegistry", "ProblemHandler", "Found", "Missing"):
        from problemdocs import registry as _registry

        return getattr(_registry, name)

    if name in ("Extension", "ProblemType", "ext"):
        from problemdocs import problem as _problem

        return getattr(_problem, name)

    if name in ("DEFAULT_TEMPLATE", "render_markdown", "render_raw", "render_template"):
        from problemdocs import pages as _pages

        return getattr(_pages, name)

    if name == "RegistryConfig":
        from problemdocs.config import RegistryConfig

        return RegistryConfig

    if name == "Response":
        from problemdocs.http.response import Response

        return Response

    if name in (
        "ConfigurationError",
        "HTTPError",
        "MethodNotAllowed",
        "NotFound",
        "ProblemDocsError",
        "TemplateError",
        "TemplateExecError",
        "TemplateParseError",
    ):
        from problemdocs import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
