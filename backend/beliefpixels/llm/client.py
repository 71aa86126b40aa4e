"""LangChain ChatAnthropic wrapper."""

from __future__ import annotations

from beliefpixels.config import settings
from beliefpixels.errors import LLMNotConfiguredError
from beliefpixels.llm.model_router import get_model_for_task


async def complete_text(system: str, prompt: str, task: str = "extract") -> str:
    """Single non-streaming completion: one system turn, one user turn."""
    if not settings.anthropic_api_key:
        raise LLMNotConfiguredError("LLM not configured, set ANTHROPIC_API_KEY in .env")

    from langchain_anthropic import ChatAnthropic
    from langchain_core.messages import HumanMessage, SystemMessage

    llm = ChatAnthropic(
        model=get_model_for_task(task),
        api_key=settings.anthropic_api_key,
        max_tokens=2048,
    )

    response = await llm.ainvoke([SystemMessage(content=system), HumanMessage(content=prompt)])
    content = response.content
    if isinstance(content, list):
        return "".join(
            block.get("text", "") if isinstance(block, dict) else str(block)
            for block in content
        )
    return str(content)
