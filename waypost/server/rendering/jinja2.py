import os
from functools import lru_cache
from typing import Optional

from jinja2 import BaseLoader, Environment, PackageLoader, Template, select_autoescape

from waypost.utils import truthy

from .abc import Renderer

_DEFAULT_TEMPLATES_EXTENSION = os.environ.get("APP_JINJA_EXTENSION", ".jinja")


@lru_cache(1200)
def get_template_name(name: str) -> str:
    if not name.endswith(_DEFAULT_TEMPLATES_EXTENSION):
        return name + _DEFAULT_TEMPLATES_EXTENSION
    return name


def render_template(template: Template, *args, **kwargs):
    return template.render(*args, **kwargs)


class JinjaRenderer(Renderer):
    def __init__(
        self,
        loader: Optional[BaseLoader] = None,
        debug: bool = False,
    ) -> None:
        super().__init__()
        self.env = Environment(
            loader=loader
            or PackageLoader(
                os.environ.get("APP_JINJA_PACKAGE_NAME", "app"),
                os.environ.get("APP_JINJA_PACKAGE_PATH", "views"),
            ),
            autoescape=select_autoescape(["html", "xml", "jinja"]),
            auto_reload=truthy(os.environ.get("APP_JINJA_DEBUG", "")) or debug,
        )

    def get_template(self, name: str, cache: bool = True) -> Template:
        name = get_template_name(name)
        if cache:
            return self.env.get_template(name)
        # the loader compiles the source again, skipping the environment cache
        return self.env.loader.load(self.env, name, self.env.globals)

    def render(self, template: str, model, cache: bool = True, **kwargs) -> str:
        if model:
            return render_template(self.get_template(template, cache), model, **kwargs)
        return render_template(self.get_template(template, cache), **kwargs)
