"""Starting content for new definitions."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from dictionary_wiki.errors import NotFoundError


@dataclass(frozen=True)
class DefinitionTemplate:
    id: str
    title: str
    description: str
    content: Mapping[str, Any] = field(default_factory=dict)


TEMPLATES: tuple[DefinitionTemplate, ...] = (
    DefinitionTemplate(
        id="blank",
        title="Blank Definition",
        description="Start from a completely empty slate.",
        content=MappingProxyType({"name": "New Definition", "keywords": (), "description": ""}),
    ),
    DefinitionTemplate(
        id="standard",
        title="Standard Definition",
        description="A basic template with a description section.",
        content=MappingProxyType(
            {
                "name": "New Standard Definition",
                "keywords": ("standard",),
                "description": (
                    "<h3>Overview</h3><p>A clear and concise summary of what this term means.</p>"
                ),
            }
        ),
    ),
    DefinitionTemplate(
        id="technical-spec",
        title="Technical Specification",
        description="A detailed template for technical terms.",
        content=MappingProxyType(
            {
                "name": "New Technical Specification",
                "keywords": ("technical", "sql"),
                "description": (
                    "<h3>Purpose</h3><p>What is the goal of this technical component?</p>"
                ),
            }
        ),
    ),
)


def get_template(template_id: str) -> DefinitionTemplate:
    for template in TEMPLATES:
        if template.id == template_id:
            return template
    raise NotFoundError(template_id, kind="Template")


def apply_template(template_id: str, content: Mapping[str, Any]) -> dict[str, Any]:
    """Template content with ``content`` laid over it; explicit fields win."""
    return {**get_template(template_id).content, **content}
