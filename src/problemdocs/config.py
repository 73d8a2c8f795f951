"""Registry configuration.

RegistryConfig is a frozen dataclass: immutable after creation,
IDE-autocompletable, no string-key dict lookups.
"""

from dataclasses import dataclass
from urllib.parse import urlsplit

from problemdocs.errors import ConfigurationError

PROBLEM_CONTENT_TYPE = "application/problem+json; charset=utf-8"
HTML_CONTENT_TYPE = "text/html; charset=utf-8"


@dataclass(frozen=True, slots=True)
class RegistryConfig:
    """Problem registry configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = RegistryConfig(base_url="https://api.example.com/errors")
    """

    # Absolute root for documentation links ("" = relative paths only)
    base_url: str = ""

    # Problem bodies
    json_indent: int = 2
    problem_content_type: str = PROBLEM_CONTENT_TYPE

    # Documentation pages
    doc_content_type: str = HTML_CONTENT_TYPE
    autoescape: bool = True
    markdown_plugins: tuple[str, ...] = ()  # Empty = every patitas plugin
    markdown_highlight: bool = False

    def __post_init__(self) -> None:
        if self.base_url:
            parts = urlsplit(self.base_url)
            if not parts.scheme or not parts.netloc:
                msg = (
                    f"base_url must be an absolute URL with scheme and host, "
                    f"got {self.base_url!r}"
                )
                raise ConfigurationError(msg)
        if self.json_indent < 0:
            msg = f"json_indent must be >= 0, got {self.json_indent}"
            raise ConfigurationError(msg)
