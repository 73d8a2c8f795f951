"""Problem bodies: building and encoding RFC 7807 payloads.

A problem is an ephemeral ``dict`` built per response. Extensions go in
first; the reserved members are written afterwards so they always win::

    >>> build_problem(ProblemType("Not Found"), 404, "gone", ext("type", "x"))
    {'title': 'Not Found', 'status': 404, 'detail': 'gone'}
"""

import json as json_module
import logging
from dataclasses import dataclass
from http import HTTPStatus
from typing import Any

from problemdocs.config import PROBLEM_CONTENT_TYPE
from problemdocs.http.response import Response

logger = logging.getLogger("problemdocs.problem")

RESERVED_KEYS = ("type", "title", "status", "detail")


@dataclass(frozen=True, slots=True)
class Extension:
    """A caller-supplied member merged into a problem body."""

    key: str
    value: Any


def ext(key: str, value: Any) -> Extension:
    """Shorthand constructor for an ``Extension``."""
    return Extension(key=key, value=value)


@dataclass(frozen=True, slots=True)
class ProblemType:
    """What a registration fixes about a title: its name and doc URL.

    ``doc_url`` is empty when no documentation page was rendered.
    """

    title: str
    doc_url: str = ""


def reason_phrase(status: int) -> str:
    """Standard reason phrase for *status*, or ``""`` if unknown."""
    try:
        return HTTPStatus(status).phrase
    except ValueError:
        return ""


def build_problem(
    problem_type: ProblemType,
    status: int,
    detail: str,
    *extensions: Extension,
) -> dict[str, Any]:
    """Build the problem mapping for one error occurrence.

    Later extensions overwrite earlier ones with the same key. The
    reserved members are written last and override any extension.
    A ``type`` extension never survives when there is no doc URL.
    """
    problem: dict[str, Any] = {}
    for extension in extensions:
        problem[extension.key] = extension.value

    if problem_type.doc_url:
        problem["type"] = problem_type.doc_url
    else:
        problem.pop("type", None)
    problem["title"] = problem_type.title
    problem["status"] = status
    problem["detail"] = detail
    return problem


def _ordered(problem: dict[str, Any]) -> dict[str, Any]:
    """Reserved members first, then extensions in insertion order."""
    ordered = {key: problem[key] for key in RESERVED_KEYS if key in problem}
    ordered.update((key, value) for key, value in problem.items() if key not in ordered)
    return ordered


def encode_problem(problem: dict[str, Any], *, indent: int = 2) -> bytes:
    """Serialize *problem* as indented JSON with a trailing newline.

    If an extension value cannot be encoded, a warning is logged and
    the reserved members alone are encoded instead, so callers always
    get a complete body.
    """
    try:
        text = json_module.dumps(_ordered(problem), indent=indent, allow_nan=False)
    except (TypeError, ValueError) as exc:
        logger.warning(
            "Dropping extensions from problem %r: %s",
            problem.get("title", ""),
            exc,
        )
        minimal = {key: problem[key] for key in RESERVED_KEYS if key in problem}
        text = json_module.dumps(minimal, indent=indent, default=str)
    return (text + "\n").encode("utf-8")


def problem_response(
    problem_type: ProblemType,
    status: int,
    detail: str,
    *extensions: Extension,
    indent: int = 2,
    content_type: str = PROBLEM_CONTENT_TYPE,
) -> Response:
    """Build the complete problem Response for one error occurrence."""
    problem = build_problem(problem_type, status, detail, *extensions)
    return Response(
        body=encode_problem(problem, indent=indent),
        status=status,
        content_type=content_type,
    )
