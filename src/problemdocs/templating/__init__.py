"""Templating: kida environment setup for templated documentation pages."""

from problemdocs.templating.integration import create_environment, render_doc_template

__all__ = ["create_environment", "render_doc_template"]
