"""Template loading and rendering for portfolio posts."""

from typing import Any, Dict

from jinja2 import Environment, StrictUndefined, Template, TemplateError, TemplateSyntaxError

from foglio.models import ConfigurationError, RenderError

# Markdown front matter often uses {{ }} and {% %}, so those stay literal.
VARIABLE_DELIMITERS = ("[[", "]]")
BLOCK_DELIMITERS = ("[%", "%]")
COMMENT_DELIMITERS = ("[#", "#]")


def create_environment() -> Environment:
    """Create the Jinja2 environment used for post templates."""
    return Environment(
        variable_start_string=VARIABLE_DELIMITERS[0],
        variable_end_string=VARIABLE_DELIMITERS[1],
        block_start_string=BLOCK_DELIMITERS[0],
        block_end_string=BLOCK_DELIMITERS[1],
        comment_start_string=COMMENT_DELIMITERS[0],
        comment_end_string=COMMENT_DELIMITERS[1],
        undefined=StrictUndefined,
        keep_trailing_newline=True,
        autoescape=False,
    )


def parse_template(source: str) -> Template:
    """Compile template source.

    Raises:
        ConfigurationError: If the template has a syntax error
    """
    try:
        return create_environment().from_string(source)
    except TemplateSyntaxError as e:
        raise ConfigurationError(f"Error generating template: {e}") from e


def load_template(template_path: str) -> Template:
    """Load and compile a post template file.

    Args:
        template_path: Path to the template file

    Returns:
        Compiled template

    Raises:
        ConfigurationError: If the file cannot be read or parsed
    """
    try:
        with open(template_path, "r", encoding="utf-8") as f:
            source = f.read()
    except OSError as e:
        raise ConfigurationError(f"Error parsing template file [{template_path}]: {e}") from e

    return parse_template(source)


def render_template(template: Template, context: Dict[str, Any]) -> str:
    """Render a template, turning Jinja2 failures into RenderError."""
    try:
        return template.render(**context)
    except TemplateError as e:
        raise RenderError(str(e)) from e
