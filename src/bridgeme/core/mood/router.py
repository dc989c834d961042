"""Mood to mode to system prompt lookups."""

from bridgeme.configs.system import PromptConfig

from .models import Mode, Mood

_MODE_BY_MOOD: dict[Mood, Mode] = {
    Mood.NEGATIVE: Mode.SUPPORTIVE,
    Mood.NEUTRAL: Mode.EXPLORATORY,
    Mood.POSITIVE: Mode.EXPLORATORY,
}


def mode_for_mood(mood: Mood) -> Mode:
    return _MODE_BY_MOOD[mood]


def system_prompt_for_mode(mode: Mode, prompts: PromptConfig) -> str:
    if mode is Mode.SUPPORTIVE:
        return prompts.supportive
    return prompts.exploratory
