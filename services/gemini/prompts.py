"""Prompt helpers for campaign copy and the marketing assistant."""

from __future__ import annotations


def copywriter_system_prompt() -> str:
    """Return the system instruction for campaign copy generation."""
    return "You are a world-class marketing copywriter. Your goal is to drive conversions."


def campaign_user_prompt(topic: str, audience: str, tone: str) -> str:
    """Return the instruction that embeds the campaign inputs verbatim."""
    return (
        f"Create an email marketing campaign for: {topic}.\n"
        f"Target Audience: {audience}.\n"
        f"Tone: {tone}.\n\n"
        "I need:\n"
        "1. 3 catchy subject lines.\n"
        "2. The main body copy for the email (formatted with Markdown).\n"
        "3. A detailed visual description (image prompt) that represents the campaign theme, "
        "suitable for an AI image generator."
    )


def chat_persona_prompt() -> str:
    """Return the persona instruction for the marketing assistant chat."""
    return (
        "You are a helpful and creative marketing assistant. You help users refine their marketing "
        "strategies, brainstorm ideas, and troubleshoot campaign issues."
    )


def chat_greeting() -> str:
    return "Hello! I am your AI marketing assistant. Ask me anything about strategy, copywriting, or analytics."
