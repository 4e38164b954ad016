"""Prompt construction for generated clothing descriptions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from closetcam.storage.repository import PhotoItem

NO_DETAILS = "No additional details"


@dataclass(slots=True)
class DescriptionPromptContext:
    """What is known about a catalogued item."""

    color: str
    clothing_type: str
    details: Sequence[str] = ()

    @classmethod
    def from_item(cls, item: PhotoItem) -> DescriptionPromptContext:
        # The colour name is what capture stores in ``description``.
        return cls(
            color=item.metadata.description,
            clothing_type=item.metadata.category,
            details=[photo.text for photo in item.associated_photos],
        )


class PromptBuilder:
    def build(self, context: DescriptionPromptContext) -> str:
        details = "; ".join(context.details)
        return (
            f"Describe a {context.color} {context.clothing_type} "
            f"with the following details: {details or NO_DETAILS}."
        )
