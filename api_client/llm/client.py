"""LangChain-backed structured-output client.

``StructuredLLM.generate`` is the single seam through which every generative
step talks to a model: it renders a system/user prompt pair, asks the chat
model for an object matching a pydantic schema, and validates the answer
before returning it.
"""

from __future__ import annotations

import logging
from typing import Any, TypeVar

from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.prompts import ChatPromptTemplate
from pydantic import BaseModel, ValidationError

from models.errors import ModelOutputError

logger = logging.getLogger(__name__)

SchemaT = TypeVar("SchemaT", bound=BaseModel)


def create_chat_model(provider: str, model: str, temperature: float) -> BaseChatModel:
    """Instantiate the appropriate LangChain chat model."""
    provider = provider.lower()

    if provider == "openai":
        from langchain_openai import ChatOpenAI

        return ChatOpenAI(model=model, temperature=temperature)
    elif provider == "anthropic":
        from langchain_anthropic import ChatAnthropic

        return ChatAnthropic(model=model, temperature=temperature)
    else:
        raise ValueError(
            f"Unsupported LLM provider '{provider}'. "
            f"Supported: 'openai', 'anthropic'."
        )


class StructuredLLM:
    """Schema-validating adapter around a LangChain chat model."""

    def __init__(self, llm: BaseChatModel, name: str = "") -> None:
        self._llm = llm
        self.name = name or type(llm).__name__

    async def generate(
        self,
        schema: type[SchemaT],
        system_prompt: str,
        user_prompt: str,
        variables: dict[str, Any] | None = None,
    ) -> SchemaT:
        """Return a validated *schema* instance.

        *system_prompt* and *user_prompt* are ``ChatPromptTemplate`` templates;
        literal braces must be doubled and bulky payloads (JSON evidence)
        passed through *variables*.

        Raises ``ModelOutputError`` if the call fails, returns nothing, or
        returns something that does not validate against *schema*.
        """
        prompt = ChatPromptTemplate.from_messages([
            ("system", system_prompt),
            ("user", user_prompt),
        ])
        chain = prompt | self._llm.with_structured_output(schema)

        try:
            raw = await chain.ainvoke(variables or {})
        except Exception as exc:
            raise ModelOutputError(
                f"{schema.__name__} generation failed ({self.name}): {exc}"
            ) from exc

        if raw is None:
            raise ModelOutputError(f"{schema.__name__} generation returned no object.")

        try:
            result = schema.model_validate(
                raw.model_dump() if isinstance(raw, BaseModel) else raw
            )
        except ValidationError as exc:
            raise ModelOutputError(
                f"{schema.__name__} output failed validation: {exc}"
            ) from exc

        logger.debug("%s produced %s.", self.name, schema.__name__)
        return result
