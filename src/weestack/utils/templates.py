"""Template rendering utilities."""

import logging
from jinja2 import Environment, BaseLoader, StrictUndefined, Template, TemplateError


logger = logging.getLogger(__name__)


class StringTemplateLoader(BaseLoader):
    """Template loader for string templates."""

    def __init__(self, template_string: str):
        self.template_string = template_string

    def get_source(self, environment, template):
        return self.template_string, None, lambda: True


def compile_template(template_str: str) -> Template:
    """Parse a Jinja2 template string once for repeated rendering.

    Undefined variables are errors, and the text is reproduced byte for
    byte, trailing newline included.
    """
    try:
        env = Environment(
            loader=StringTemplateLoader(template_str),
            undefined=StrictUndefined,
            keep_trailing_newline=True,
            autoescape=False,
        )
        return env.get_template("")
    except TemplateError as e:
        logger.error(f"Template parsing error: {e}")
        raise
