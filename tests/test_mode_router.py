"""Tests for the mood-to-mode lookup and prompt selection."""

import pytest

from bridgeme.configs.system import PromptConfig
from bridgeme.core.mood import Mode, Mood, mode_for_mood, system_prompt_for_mode


class TestModeForMood:
    @pytest.mark.parametrize(
        "mood,mode",
        [
            (Mood.NEGATIVE, Mode.SUPPORTIVE),
            (Mood.NEUTRAL, Mode.EXPLORATORY),
            (Mood.POSITIVE, Mode.EXPLORATORY),
        ],
    )
    def test_mapping(self, mood, mode):
        assert mode_for_mood(mood) is mode

    def test_every_mood_is_routed(self):
        assert {mode_for_mood(m) for m in Mood} == set(Mode)

    def test_mode_values_are_display_names(self):
        assert Mode.SUPPORTIVE.value == "Supportive"
        assert Mode.EXPLORATORY.value == "Exploratory"


class TestSystemPromptForMode:
    def test_picks_matching_prompt(self):
        prompts = PromptConfig(classifier="c", supportive="S", exploratory="E")
        assert system_prompt_for_mode(Mode.SUPPORTIVE, prompts) == "S"
        assert system_prompt_for_mode(Mode.EXPLORATORY, prompts) == "E"
