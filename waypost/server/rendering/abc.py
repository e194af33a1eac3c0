from abc import ABC, abstractmethod


class Renderer(ABC):
    """Type that can render views for view routes."""

    @abstractmethod
    def render(self, template: str, model, cache: bool = True, **kwargs) -> str:
        """
        Renders a view synchronously. When cache is False, the template is loaded
        again from its source instead of being served from the template cache.
        """
