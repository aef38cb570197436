from __future__ import annotations

import logging
from functools import lru_cache
from typing import Optional

from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.output_parsers import StrOutputParser
from langchain_core.prompts import ChatPromptTemplate
from langchain_core.runnables import Runnable
from langchain_google_genai import ChatGoogleGenerativeAI

from config.settings import Settings, get_settings


logger = logging.getLogger(__name__)


def build_llm(settings: Settings) -> BaseChatModel:
    if not settings.google_api_key:
        raise RuntimeError(
            "GOOGLE_API_KEY not set. Please configure it in environment or .env"
        )

    return ChatGoogleGenerativeAI(
        model=settings.gemini_model,
        google_api_key=settings.google_api_key,
        temperature=settings.temperature,
        top_p=settings.top_p,
        max_output_tokens=settings.max_output_tokens,
        timeout=settings.responder_timeout,
        max_retries=settings.responder_max_retries,
    )


def build_chain(llm: BaseChatModel) -> Runnable:
    prompt = ChatPromptTemplate.from_messages(
        [
            ("system", "{policy}"),
            ("human", "{message}"),
        ]
    )
    return prompt | llm | StrOutputParser()


class TextResponder:
    """Answers free-text player questions under a system policy."""

    def __init__(self, chain: Runnable) -> None:
        self._chain = chain

    def __call__(self, policy: str, message: str) -> str:
        output = self._chain.invoke({"policy": policy, "message": message})
        return (output or "").strip()


class UnavailableResponder:
    """Stand-in used when no model is configured; every call fails."""

    def __init__(self, reason: str) -> None:
        self.reason = reason

    def __call__(self, policy: str, message: str) -> str:
        raise RuntimeError(self.reason)


def build_responder(settings: Optional[Settings] = None) -> TextResponder:
    settings = settings or get_settings()
    return TextResponder(build_chain(build_llm(settings)))


@lru_cache(maxsize=1)
def get_responder():
    try:
        return build_responder()
    except RuntimeError as exc:
        logger.warning("Text responder unavailable: %s", exc)
        return UnavailableResponder(str(exc))
