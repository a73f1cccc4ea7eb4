from .deps import get_llm, get_text_generator
from .generator import ChatModelGenerator, GenerationError, TextGenerator

__all__ = [
    "ChatModelGenerator",
    "GenerationError",
    "TextGenerator",
    "get_llm",
    "get_text_generator",
]
