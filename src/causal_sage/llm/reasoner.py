"""
Reasoner (text generation) service boundary.
"""
import logging
from abc import ABC, abstractmethod
from typing import List, Optional

from openai import OpenAI
from pydantic import BaseModel

logger = logging.getLogger(__name__)


class Message(BaseModel):
    """One chat message."""
    role: str
    content: str


class ReasonerOptions(BaseModel):
    """Sampling options for a Reasoner call."""
    model: Optional[str] = None
    temperature: Optional[float] = None
    top_p: Optional[float] = None
    seed: Optional[int] = None


class Reasoner(ABC):
    """Text completion service used by every pipeline stage."""

    @abstractmethod
    def complete(self, messages: List[Message], options: ReasonerOptions) -> str:
        """
        Complete a conversation.

        Args:
            messages: Ordered chat messages
            options: Sampling options

        Returns:
            Raw text of the assistant reply
        """


class OpenAIReasoner(Reasoner):
    """Reasoner backed by an OpenAI-compatible chat completions endpoint."""

    def __init__(self, config, client: Optional[OpenAI] = None):
        """
        Initialize reasoner.

        Args:
            config: Configuration object
            client: Optional preconfigured OpenAI client
        """
        self.config = config
        self.client = client or OpenAI(
            base_url=config.base_url,
            api_key=config.api_key,
            timeout=config.request_timeout,
        )

    def complete(self, messages: List[Message], options: ReasonerOptions) -> str:
        kwargs = {
            "model": options.model or self.config.llm_model,
            "messages": [m.model_dump() for m in messages],
        }
        if options.temperature is not None:
            kwargs["temperature"] = options.temperature
        if options.top_p is not None:
            kwargs["top_p"] = options.top_p
        if options.seed is not None:
            kwargs["seed"] = options.seed

        response = self.client.chat.completions.create(**kwargs)
        content = response.choices[0].message.content or ""
        logger.debug("Reasoner response (%s): %s", kwargs["model"], content)
        return content
