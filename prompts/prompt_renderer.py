# prompts/prompt_renderer.py
"""Render the AI parser's prompt templates.

Templates live under `prompts/<parser_name>/` next to this module:
- `system.md` holds the fixed system instructions.
- `*.j2` files are Jinja2 templates rendered per request.

Rendering uses `StrictUndefined`, so a template that references a variable the
caller did not supply fails loudly instead of rendering a blank. Auto-escaping
is off; script text is passed through verbatim.
"""

from functools import lru_cache
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined

import config

PROMPTS_PATH = Path(__file__).parent
_env = Environment(
    loader=FileSystemLoader(PROMPTS_PATH),
    autoescape=False,
    undefined=StrictUndefined,
    trim_blocks=True,
    lstrip_blocks=True,
)


def render_prompt(template_name: str, context: dict[str, Any]) -> str:
    """Render a template relative to `PROMPTS_PATH`.

    The `config` module is always available to templates as `config`.

    Raises:
        jinja2.TemplateNotFound: If `template_name` does not exist.
        jinja2.UndefinedError: If the template uses a variable missing from `context`.
    """
    template = _env.get_template(template_name)
    return template.render(**{"config": config, **context})


@lru_cache(maxsize=8)
def get_system_prompt(parser_name: str) -> str:
    """Return the stripped `prompts/<parser_name>/system.md`, or "" when absent.

    Cached per process; call `get_system_prompt.cache_clear()` after editing files.
    """
    system_path = PROMPTS_PATH / parser_name / "system.md"
    if not system_path.is_file():
        return ""
    return system_path.read_text(encoding="utf-8").strip()
