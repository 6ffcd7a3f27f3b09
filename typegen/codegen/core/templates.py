"""
Template engine wrapper for code generation.

Provides a simple interface for Jinja2 template rendering with the naming
helpers as filters. Built-in templates cover the fixed boilerplate
artifacts; a template directory can override any of them by name.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional

from jinja2 import (
    ChoiceLoader,
    DictLoader,
    Environment,
    FileSystemLoader,
    StrictUndefined,
    TemplateError as JinjaTemplateError,
    select_autoescape,
)

from .naming import (
    convert_file_item,
    lower_first,
    pluralize,
    to_camel_case,
    to_pascal_case,
    to_snake_case,
)


class TemplateError(Exception):
    """Exception raised for template-related errors."""

    pass


# Built-in templates
TYPESCRIPT_SERVICE_TEMPLATE = """\
@Injectable({
  providedIn: 'root',
})
export class {{ entity_name }}Service extends {{ base_service }}<{{ model_name }}> {
  constructor(public override http: HttpClient) {
    super(http, environment.API_BASE_URL + '/{{ entity_name | plural | lower }}');
  }
}
"""

TYPESCRIPT_SERVICE_IMPORTS_TEMPLATE = """\
import { Injectable } from '@angular/core';
import { HttpClient } from '@angular/common/http';
import { {{ base_service }} } from '{{ service_alias }}/{{ base_service_module }}';
import { environment } from '@environment/environment';
"""

CSHARP_INHERITANCE_TEMPLATE = """\
partial class {{ class_name }} : {{ base_class }}
{
}
"""

BUILTIN_TEMPLATES = {
    "typescript/service.ts": TYPESCRIPT_SERVICE_TEMPLATE,
    "typescript/service_imports.ts": TYPESCRIPT_SERVICE_IMPORTS_TEMPLATE,
    "csharp/inheritance.cs": CSHARP_INHERITANCE_TEMPLATE,
}


class TemplateEngine:
    """Wrapper for Jinja2 template engine with code generation utilities."""

    def __init__(self, template_dir: Optional[Path] = None,
                 templates: Optional[Dict[str, str]] = None):
        """
        Initialize template engine.

        Args:
            template_dir: Directory whose templates take precedence over the built-ins
            templates: In-memory templates (defaults to the built-ins)
        """
        self.template_dir = Path(template_dir) if template_dir else None
        self._memory = DictLoader(dict(BUILTIN_TEMPLATES if templates is None else templates))
        self._env = None
        self._setup_environment()

    def _setup_environment(self):
        """Setup Jinja2 environment with code generation utilities."""
        loaders = []
        if self.template_dir and self.template_dir.exists():
            loaders.append(FileSystemLoader(str(self.template_dir)))
        loaders.append(self._memory)

        self._env = Environment(
            loader=ChoiceLoader(loaders),
            autoescape=select_autoescape(["html", "xml"], default_for_string=False),
            undefined=StrictUndefined,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=False,
        )

        # Add custom filters for code generation
        self._env.filters["snake_case"] = to_snake_case
        self._env.filters["camel_case"] = to_camel_case
        self._env.filters["pascal_case"] = to_pascal_case
        self._env.filters["lower_first"] = lower_first
        self._env.filters["file_item"] = convert_file_item
        self._env.filters["plural"] = pluralize

    def render_template(self, template_name: str, context: Dict[str, Any]) -> str:
        """
        Render a template with the given context.

        Args:
            template_name: Name of template
            context: Variables to pass to template

        Returns:
            Rendered template content
        """
        try:
            template = self._env.get_template(template_name)
            return template.render(**context)
        except JinjaTemplateError as e:
            raise TemplateError(f"Failed to render template {template_name}: {e}") from e

    def render_lines(self, template_name: str, context: Dict[str, Any]) -> List[str]:
        """Render a template and split the result into lines."""
        return self.render_template(template_name, context).splitlines()


def create_template_engine(template_dir: Optional[Path] = None) -> TemplateEngine:
    """Create a template engine with the built-in templates."""
    return TemplateEngine(template_dir)
