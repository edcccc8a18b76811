"""Agent descriptor loaded from YAML."""

from __future__ import annotations

import logging
import os
from importlib import resources

import yaml
from pydantic import BaseModel, Field, ValidationError

from .models import Category

logger = logging.getLogger(__name__)

DESCRIPTOR_RESOURCE = "agent.yaml"


class AgentDescriptor(BaseModel):
    """Identity and default behaviour of the review agent."""

    name: str
    description: str
    model: str | None = None
    instructions: str = ""
    categories: list[Category] = Field(default_factory=lambda: list(Category))

    def enables(self, category: Category) -> bool:
        return category in self.categories


def load_descriptor(path: str | os.PathLike[str] | None = None) -> AgentDescriptor:
    """Parse an agent descriptor; defaults to the packaged ``agent.yaml``.

    ``yaml.safe_load`` errors propagate unchanged. Shape errors are re-raised as
    ``ValueError`` naming the source.
    """

    if path is None:
        source = f"package resource '{DESCRIPTOR_RESOURCE}'"
        text = resources.files(__package__).joinpath(DESCRIPTOR_RESOURCE).read_text(encoding="utf-8")
    else:
        source = str(path)
        with open(path, "r", encoding="utf-8") as handle:
            text = handle.read()

    data = yaml.safe_load(text)
    if not isinstance(data, dict) or "agent" not in data:
        raise ValueError(f"Agent descriptor {source} must contain a top-level 'agent' mapping")

    try:
        descriptor = AgentDescriptor.model_validate(data["agent"])
    except ValidationError as exc:
        raise ValueError(f"Agent descriptor {source} is invalid: {exc}") from exc

    logger.debug("Loaded agent descriptor '%s' from %s", descriptor.name, source)
    return descriptor
