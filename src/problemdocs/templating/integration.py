"""Kida environment setup and documentation template rendering.

Creates a kida Environment from a RegistryConfig. The environment is
created once per registry and reused for every templated page.
"""

from kida import Environment

from problemdocs.config import RegistryConfig
from problemdocs.errors import TemplateExecError, TemplateParseError


def create_environment(config: RegistryConfig | None = None) -> Environment:
    """Create a kida Environment for documentation templates.

    Templates are compiled from strings, so no loader is configured.
    """
    config = config or RegistryConfig()
    return Environment(autoescape=config.autoescape)


def render_doc_template(
    env: Environment,
    source: str,
    title: str,
    description: str,
) -> str:
    """Compile *source* and render it with ``Title`` and ``Description``.

    Raises:
        TemplateParseError: *source* is not a valid kida template.
        TemplateExecError: the compiled template failed while rendering.
    """
    try:
        tmpl = env.from_string(source)
    except Exception as exc:
        raise TemplateParseError(title, str(exc)) from exc

    try:
        return tmpl.render({"Title": title, "Description": description})
    except Exception as exc:
        raise TemplateExecError(title, str(exc)) from exc
