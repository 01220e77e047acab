from typing import Any


class PromptAdapter:
    """Shapes a system prompt plus chat messages for each provider's API."""

    @staticmethod
    def for_claude(system: str, messages: list[dict[str, str]]) -> dict[str, Any]:
        """Anthropic takes the system prompt as separate text blocks."""
        payload: dict[str, Any] = {"messages": list(messages)}
        if system:
            payload["system"] = [{"type": "text", "text": system}]
        return payload

    @staticmethod
    def for_openai(system: str, messages: list[dict[str, str]]) -> dict[str, Any]:
        """OpenAI and Azure OpenAI take it as the first chat message."""
        if not system:
            return {"messages": list(messages)}
        return {"messages": [{"role": "system", "content": system}, *messages]}
