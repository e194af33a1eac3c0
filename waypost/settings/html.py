from waypost.server.rendering.abc import Renderer


def default_renderer() -> Renderer:
    from waypost.server.rendering.jinja2 import JinjaRenderer

    return JinjaRenderer()


class HTMLSettings:
    def __init__(self):
        self._renderer: Renderer | None = None

    def use(self, renderer: Renderer):
        self._renderer = renderer

    @property
    def renderer(self) -> Renderer:
        if self._renderer is None:
            self._renderer = default_renderer()
        return self._renderer


html_settings = HTMLSettings()
