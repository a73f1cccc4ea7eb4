"""Factory functions for the generation collaborator."""

import logging
from typing import Annotated

from fastapi import Depends
from langchain_openai import ChatOpenAI

from flybus.configs.config import get_llm_config
from flybus.configs.system import LLMConfig

from .generator import ChatModelGenerator, TextGenerator

logger = logging.getLogger(__name__)


def get_llm(
    config: Annotated[LLMConfig, Depends(get_llm_config)],
) -> ChatOpenAI:
    """Create the chat model client.

    ``max_retries`` is pinned to 0: a failed generation surfaces
    immediately as an apology reply instead of being retried.
    """
    return ChatOpenAI(
        base_url=config.endpoint,
        api_key=config.api_key.get_secret_value() or None,
        model=config.model_name,
        temperature=config.temperature,
        max_tokens=config.max_tokens,
        timeout=config.model_timeout.total_seconds(),
        max_retries=0,
        streaming=False,
    )


def get_text_generator(
    config: Annotated[LLMConfig, Depends(get_llm_config)],
    llm: Annotated[ChatOpenAI, Depends(get_llm)],
) -> TextGenerator:
    return ChatModelGenerator(llm, model_name=config.model_name)
