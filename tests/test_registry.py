"""Tests for problemdocs.registry: registration, lookup, and dispatch."""

import json
import threading

import pytest

from problemdocs.config import PROBLEM_CONTENT_TYPE, RegistryConfig
from problemdocs.errors import ConfigurationError, TemplateExecError, TemplateParseError
from problemdocs.pages import render_markdown, render_template
from problemdocs.problem import ext
from problemdocs.registry import (
    Found,
    Missing,
    ProblemHandler,
    ProblemRegistry,
    doc_path,
    join_url,
)

BASE = "https://api.example.com"


class TestDocPath:
    def test_plain_title(self) -> None:
        assert doc_path("NotFound") == "/NotFound.html"

    def test_space_is_escaped(self) -> None:
        assert doc_path("Not Found") == "/Not%20Found.html"

    def test_slash_and_query_characters_are_escaped(self) -> None:
        assert doc_path("a/b?c#d") == "/a%2Fb%3Fc%23d.html"

    def test_segment_safe_characters_kept(self) -> None:
        assert doc_path("a:b@c+d") == "/a:b@c+d.html"

    def test_non_ascii_is_utf8_escaped(self) -> None:
        assert doc_path("é") == "/%C3%A9.html"


class TestJoinUrl:
    @pytest.mark.parametrize(
        ("base", "expected"),
        [
            ("https://api.example.com", "https://api.example.com/A.html"),
            ("https://api.example.com/", "https://api.example.com/A.html"),
            ("https://api.example.com/errors", "https://api.example.com/errors/A.html"),
            ("https://api.example.com/errors/", "https://api.example.com/errors/A.html"),
            ("https://api.example.com/a/../errors", "https://api.example.com/errors/A.html"),
        ],
    )
    def test_path_join_semantics(self, base: str, expected: str) -> None:
        assert join_url(base, "/A.html") == expected

    def test_empty_base_yields_path(self) -> None:
        assert join_url("", "/A.html") == "/A.html"


class TestConstruction:
    def test_base_url_positional(self) -> None:
        assert ProblemRegistry(BASE).base_url == BASE

    def test_from_config(self) -> None:
        registry = ProblemRegistry.from_config(RegistryConfig(base_url=BASE, json_indent=4))
        assert registry.base_url == BASE
        assert registry.config.json_indent == 4

    def test_base_url_overrides_config(self) -> None:
        registry = ProblemRegistry("https://other.example.com", config=RegistryConfig(base_url=BASE))
        assert registry.base_url == "https://other.example.com"

    def test_invalid_base_url(self) -> None:
        with pytest.raises(ConfigurationError):
            ProblemRegistry("not a url")

    def test_starts_empty(self) -> None:
        registry = ProblemRegistry(BASE)
        assert len(registry) == 0
        assert registry.titles == []
        assert registry.routes == []


class TestRegister:
    def test_without_page(self) -> None:
        registry = ProblemRegistry(BASE)
        handler = registry.register("NotFound", None)

        assert isinstance(handler, ProblemHandler)
        assert handler.title == "NotFound"
        assert handler.doc_url == ""
        assert registry.routes == []
        assert "NotFound" in registry

    def test_empty_bytes_is_no_page(self) -> None:
        registry = ProblemRegistry(BASE)
        assert registry.register("NotFound", b"").doc_url == ""
        assert registry.routes == []

    def test_with_page(self) -> None:
        registry = ProblemRegistry(BASE)
        handler = registry.register("NotFound", b"<html></html>")

        assert handler.doc_url == "https://api.example.com/NotFound.html"
        assert [route.path for route in registry.routes] == ["/NotFound.html"]
        assert registry.doc_url("NotFound") == handler.doc_url

    def test_escaped_title_in_doc_url(self) -> None:
        registry = ProblemRegistry(BASE)
        handler = registry.register("Bad Input", b"<html></html>")
        assert handler.doc_url == "https://api.example.com/Bad%20Input.html"

    def test_base_path_is_joined(self) -> None:
        registry = ProblemRegistry("https://api.example.com/problems/")
        handler = registry.register("Not Found", b"<html></html>")
        assert handler.doc_url == "https://api.example.com/problems/Not%20Found.html"

    def test_returns_the_stored_handler(self) -> None:
        registry = ProblemRegistry(BASE)
        handler = registry.register("NotFound", b"<p>x</p>")
        match registry.lookup("NotFound"):
            case Found(found):
                assert found is handler
            case _:
                pytest.fail("expected Found")

    def test_reregistration_replaces_handler(self) -> None:
        registry = ProblemRegistry(BASE)
        registry.register("Gone", b"<p>old</p>")
        registry.register("Gone", None)

        assert registry.doc_url("Gone") == ""
        body = registry.error("Gone", 410, "bye").json()
        assert "type" not in body
        # The old page stays installed but is no longer referenced
        assert [route.path for route in registry.routes] == ["/Gone.html"]

    def test_reregistration_uses_new_doc_url(self) -> None:
        registry = ProblemRegistry(BASE)
        registry.register("Gone", None)
        registry.register("Gone", b"<p>new</p>")

        assert registry.error("Gone", 410, "bye").json()["type"] == f"{BASE}/Gone.html"

    def test_titles_are_case_sensitive(self) -> None:
        registry = ProblemRegistry(BASE)
        registry.register("gone", None)

        assert isinstance(registry.lookup("Gone"), Missing)
        assert registry.titles == ["gone"]

    def test_concurrent_registration(self) -> None:
        registry = ProblemRegistry(BASE)

        def register_batch(offset: int) -> None:
            for i in range(50):
                registry.register(f"Problem {offset + i}", b"<p>doc</p>")

        threads = [threading.Thread(target=register_batch, args=(n * 50,)) for n in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(registry) == 200
        assert len(registry.routes) == 200


class TestConvenienceRegistration:
    def test_doc_uses_default_template(self) -> None:
        registry = ProblemRegistry(BASE)
        handler = registry.doc("Oops", "bad input")

        assert handler.doc_url == f"{BASE}/Oops.html"
        page = registry.routes[0].handler()
        assert page.body_bytes == render_template("Oops", "bad input")

    def test_template_doc(self) -> None:
        registry = ProblemRegistry(BASE)
        registry.template_doc("Oops", "bad input", "<b>{{ Title }}</b> {{ Description }}")

        assert registry.routes[0].handler().body_bytes == b"<b>Oops</b> bad input"

    def test_template_parse_error_registers_nothing(self) -> None:
        registry = ProblemRegistry(BASE)

        with pytest.raises(TemplateParseError):
            registry.template_doc("Oops", "bad input", "{% if Title %}never closed")

        assert "Oops" not in registry
        assert registry.routes == []

    def test_template_exec_error_registers_nothing(self) -> None:
        registry = ProblemRegistry(BASE)

        with pytest.raises(TemplateExecError):
            registry.template_doc("Oops", "bad input", "{{ Title.upper(1, 2, 3) }}")

        assert "Oops" not in registry
        assert registry.routes == []

    def test_markdown_doc(self) -> None:
        registry = ProblemRegistry(BASE)
        handler = registry.markdown_doc("Rate Limited", b"# Slow down")

        assert handler.doc_url == f"{BASE}/Rate%20Limited.html"
        assert registry.routes[0].handler().body_bytes == render_markdown(
            "Rate Limited", b"# Slow down"
        )

    def test_html_doc(self) -> None:
        registry = ProblemRegistry(BASE)
        registry.html_doc("Raw", "<p>raw</p>")

        assert registry.routes[0].handler().body_bytes == b"<p>raw</p>"

    @pytest.mark.parametrize("content", [None, b"", ""])
    def test_html_doc_without_content(self, content: bytes | str | None) -> None:
        registry = ProblemRegistry(BASE)
        assert registry.html_doc("Raw", content).doc_url == ""
        assert registry.routes == []


class TestError:
    def test_registered_title(self) -> None:
        registry = ProblemRegistry(BASE)
        registry.doc("Not Found", "The resource does not exist.")

        response = registry.error("Not Found", 404, "no such resource")

        assert response.status == 404
        assert response.content_type == PROBLEM_CONTENT_TYPE
        assert response.json() == {
            "type": f"{BASE}/Not%20Found.html",
            "title": "Not Found",
            "status": 404,
            "detail": "no such resource",
        }

    def test_registered_without_page(self) -> None:
        registry = ProblemRegistry(BASE)
        registry.register("NotFound", None)

        response = registry.error("NotFound", 404, "no such user")

        assert response.status == 404
        assert response.json() == {"title": "NotFound", "status": 404, "detail": "no such user"}

    def test_unregistered_title_falls_back(self) -> None:
        registry = ProblemRegistry(BASE)

        response = registry.error("Teapot", 418, "short and stout", ext("type", "bogus"))

        assert response.status == 418
        assert response.content_type == PROBLEM_CONTENT_TYPE
        assert response.json() == {"title": "Teapot", "status": 418, "detail": "short and stout"}

    def test_empty_title_uses_reason_phrase(self) -> None:
        registry = ProblemRegistry(BASE)
        assert registry.error("", 404, "gone").json()["title"] == "Not Found"

    def test_empty_title_unknown_status(self) -> None:
        registry = ProblemRegistry(BASE)
        assert registry.error("", 599, "odd").json()["title"] == ""

    def test_empty_title_can_be_registered(self) -> None:
        registry = ProblemRegistry(BASE)
        registry.register("", None)
        assert registry.error("", 404, "gone").json()["title"] == ""

    def test_bogus_type_extension_never_wins(self) -> None:
        registry = ProblemRegistry(BASE)
        handler = registry.html_doc("Conflict", b"<p>conflict</p>")

        body = registry.error("Conflict", 409, "taken", ext("type", "bogus")).json()

        assert body["type"] == handler.doc_url

    def test_extensions_in_body(self) -> None:
        registry = ProblemRegistry(BASE)
        registry.doc("Out of Credit", "Top up.")

        body = registry.error(
            "Out of Credit",
            403,
            "balance is 30",
            ext("balance", 30),
            ext("accounts", ["/account/12345", "/account/67890"]),
        ).json()

        assert body["balance"] == 30
        assert body["accounts"] == ["/account/12345", "/account/67890"]

    def test_handler_called_directly_matches_error(self) -> None:
        registry = ProblemRegistry(BASE)
        handler = registry.doc("Oops", "bad input")

        direct = handler(400, "bad", ext("field", "name"))
        via_registry = registry.error("Oops", 400, "bad", ext("field", "name"))

        assert direct == via_registry

    def test_unserializable_extension_still_complete(self) -> None:
        registry = ProblemRegistry(BASE)
        registry.register("Boom", None)

        body = json.loads(registry.error("Boom", 500, "x", ext("bad", {1, 2})).body_bytes)

        assert body == {"title": "Boom", "status": 500, "detail": "x"}

    def test_json_indent_from_config(self) -> None:
        registry = ProblemRegistry(config=RegistryConfig(json_indent=4))
        registry.register("X", None)

        assert b'\n    "title"' in registry.error("X", 400, "").body_bytes
        assert b'\n    "title"' in registry.error("Unregistered", 400, "").body_bytes


class TestLookup:
    def test_found(self) -> None:
        registry = ProblemRegistry(BASE)
        handler = registry.register("A", None)
        assert registry.lookup("A") == Found(handler)

    def test_missing(self) -> None:
        registry = ProblemRegistry(BASE)
        assert registry.lookup("A") == Missing("A")
        assert registry.doc_url("A") == ""
