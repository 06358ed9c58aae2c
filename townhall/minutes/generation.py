"""Claude-powered minutes and summary generation from a flattened transcript."""

from __future__ import annotations

import logging
from typing import Protocol

from anthropic import Anthropic
from anthropic.types import TextBlock

from townhall.config import settings

logger = logging.getLogger(__name__)


class GenerationNotConfiguredError(Exception):
    """No Anthropic API key is configured."""


class TextGenerator(Protocol):
    """Text-in, text-out capability used by the minutes flows."""

    def generate(self, prompt_input: str) -> str: ...


MINUTES_SYSTEM_PROMPT = (
    "You are an expert at writing concise, useful meeting minutes for a "
    "neighborhood association from a meeting transcript.\n\n"
    "Rules:\n"
    "- Write the minutes in {language}.\n"
    "- Format the minutes as **Markdown**.\n"
    "- Cover the main agenda items, the decisions made, and the action items "
    "with the person responsible when it is mentioned.\n"
    "- Each transcript line has the form `speaker: text`."
)

SUMMARY_SYSTEM_PROMPT = (
    "You are an assistant that summarizes neighborhood association meetings.\n\n"
    "Rules:\n"
    "- Write the summary in {language}.\n"
    "- Format the summary as **Markdown**.\n"
    "- Keep it short and highlight the key decisions and action items.\n"
    "- Each transcript line has the form `speaker: text`."
)


class ClaudeGenerator:
    """:class:`TextGenerator` backed by the Anthropic Messages API."""

    def __init__(self, system_prompt: str, max_tokens: int = 2048) -> None:
        self.system_prompt = system_prompt
        self.max_tokens = max_tokens

    def generate(self, prompt_input: str) -> str:
        if not settings.anthropic_api_key:
            raise GenerationNotConfiguredError("ANTHROPIC_API_KEY is not configured")

        client = Anthropic(api_key=settings.anthropic_api_key)
        response = client.messages.create(
            model=settings.llm_model,
            max_tokens=self.max_tokens,
            system=self.system_prompt.format(language=settings.minutes_language),
            messages=[
                {
                    "role": "user",
                    "content": f"Meeting transcript:\n\n{prompt_input}",
                }
            ],
        )

        # We always request plain text so the first block should be TextBlock.
        block = response.content[0]
        if not isinstance(block, TextBlock):
            raise ValueError(f"Expected TextBlock from Claude, got {type(block).__name__}")

        logger.info(
            "Claude generated %d chars (%d input / %d output tokens)",
            len(block.text),
            response.usage.input_tokens,
            response.usage.output_tokens,
        )
        return block.text


def _require_transcript(transcript: str) -> str:
    if not transcript.strip():
        raise ValueError("Transcript is empty")
    return transcript


def generate_minutes(transcript: str, generator: TextGenerator | None = None) -> str:
    """Generate Markdown meeting minutes from a flattened transcript.

    Args:
        transcript: ``"speaker: text"`` lines, one per speaker turn.
        generator: Text generator to use; defaults to Claude.

    Returns:
        The minutes as Markdown.
    """
    generator = generator or ClaudeGenerator(MINUTES_SYSTEM_PROMPT, max_tokens=4096)
    return generator.generate(_require_transcript(transcript))


def summarize_minutes(transcript: str, generator: TextGenerator | None = None) -> str:
    """Generate a short Markdown summary of decisions and action items."""
    generator = generator or ClaudeGenerator(SUMMARY_SYSTEM_PROMPT)
    return generator.generate(_require_transcript(transcript))
