import os
from typing import Optional

import jinja2
from markupsafe import Markup

_TEMPLATE_DIR = os.path.join(os.path.dirname(os.path.dirname(__file__)), "html")

_jinja_env: Optional[jinja2.Environment] = None


def get_jinja_env() -> jinja2.Environment:
    """Get or create the Jinja2 environment for document templates."""
    global _jinja_env
    if _jinja_env is None:
        _jinja_env = jinja2.Environment(
            loader=jinja2.FileSystemLoader(_TEMPLATE_DIR),
            autoescape=True,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )
    return _jinja_env


def render_template(name: str, **context) -> Markup:
    """Render the template *name*; the result is trusted markup."""
    return Markup(get_jinja_env().get_template(name).render(**context))
