"""Chat reply templates."""

from rosa.templating.store import TemplateStore

__all__ = ["TemplateStore"]
