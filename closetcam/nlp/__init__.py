"""Generated clothing descriptions."""

from .description_client import DescriptionClient, DescriptionGenerationError, GeneratedDescription
from .prompt_builder import DescriptionPromptContext, PromptBuilder

__all__ = [
    "DescriptionClient",
    "DescriptionGenerationError",
    "DescriptionPromptContext",
    "GeneratedDescription",
    "PromptBuilder",
]
