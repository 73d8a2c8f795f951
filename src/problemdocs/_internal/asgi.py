"""Typed ASGI definitions.

Replaces the standard Scope = MutableMapping[str, Any] with a typed
dataclass for internal use. Users never see these.
"""

from collections.abc import Awaitable, Callable, MutableMapping
from dataclasses import dataclass
from typing import Any, TypeAlias
from urllib.parse import quote, unquote

# Raw ASGI types (matching the spec)
Scope: TypeAlias = MutableMapping[str, Any]
Receive: TypeAlias = Callable[[], Awaitable[MutableMapping[str, Any]]]
Send: TypeAlias = Callable[[MutableMapping[str, Any]], Awaitable[None]]

# Characters a path segment may carry unescaped (besides letters, digits, "_.-~")
PATH_SEGMENT_SAFE = "$&+,:;=@"


@dataclass(frozen=True, slots=True)
class HTTPScope:
    """The parts of an ASGI HTTP scope the documentation server reads."""

    method: str
    path: str
    raw_path: bytes
    root_path: str = ""

    @classmethod
    def from_scope(cls, scope: Scope) -> "HTTPScope":
        """Parse raw ASGI scope into typed object."""
        return cls(
            method=scope["method"],
            path=scope["path"],
            raw_path=scope.get("raw_path") or b"",
            root_path=scope.get("root_path", ""),
        )

    @property
    def escaped_path(self) -> str:
        """The request path, relative to ``root_path``, in canonical escaped form.

        Each segment is escaped the way routes are installed, so
        ``/%c3%a9.html`` and ``/%C3%A9.html`` are the same path. Segments
        come from ``raw_path`` when present, keeping an escaped ``%2F``
        inside its segment; otherwise ``path`` is re-escaped.
        """
        if self.raw_path:
            raw = self.raw_path.decode("latin-1").split("?", 1)[0]
            segments = [quote(unquote(seg), safe=PATH_SEGMENT_SAFE) for seg in raw.split("/")]
        else:
            segments = [quote(seg, safe=PATH_SEGMENT_SAFE) for seg in self.path.split("/")]

        root = self.root_path.rstrip("/")
        if root:
            prefix = [quote(seg, safe=PATH_SEGMENT_SAFE) for seg in root.split("/")]
            if segments[: len(prefix)] == prefix:
                segments = ["", *segments[len(prefix) :]]

        return "/".join(segments) or "/"
