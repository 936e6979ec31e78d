from .backends import (
    AnthropicPoemBackend,
    LazyPoemBackend,
    OpenAIPoemBackend,
    PoemBackend,
    get_backend,
)
from .poet import generate_from_image, regenerate_with_length, regenerate_with_tone
from .prompt_builder import build_prompt, default_style_preferences, format_style_preferences

__all__ = [
    "generate_from_image",
    "regenerate_with_length",
    "regenerate_with_tone",
    "build_prompt",
    "default_style_preferences",
    "format_style_preferences",
    "PoemBackend",
    "OpenAIPoemBackend",
    "AnthropicPoemBackend",
    "LazyPoemBackend",
    "get_backend",
]
