"""Sample messages used to eyeball mood detection against expectations."""

from typing import NamedTuple


class SampleCase(NamedTuple):
    message: str
    mood: str
    mode: str
    why: str


class EdgeCase(NamedTuple):
    message: str
    why_hard: str
    handling: str
    prod: str


TEST_CASES: list[SampleCase] = [
    SampleCase(
        "I'm so stressed about work",
        "negative",
        "Supportive",
        "Clear negative signal and stress term.",
    ),
    SampleCase(
        "That's interesting, tell me more.",
        "positive",
        "Exploratory",
        "Engaged and curious tone.",
    ),
    SampleCase(
        "Feeling kind of down lately",
        "negative",
        "Supportive",
        'Soft negative language ("down").',
    ),
    SampleCase(
        "I think things are okay, just busy",
        "neutral",
        "Exploratory",
        "Balanced/neutral sentiment with mild pressure.",
    ),
    SampleCase(
        "Super excited about the new project!",
        "positive",
        "Exploratory",
        'High-energy positive cue ("excited").',
    ),
    SampleCase(
        "Nothing seems to be working out",
        "negative",
        "Supportive",
        "Strong negative generalization.",
    ),
    SampleCase(
        "Curious what you think about my approach",
        "positive",
        "Exploratory",
        "Invitation to explore ideas.",
    ),
    SampleCase(
        "Not sure, maybe it's fine",
        "neutral",
        "Exploratory",
        "Low-certainty, neutral/ambivalent language.",
    ),
    SampleCase(
        "I'm exhausted and it's all too much",
        "negative",
        "Supportive",
        "Combined fatigue + overwhelm.",
    ),
    SampleCase(
        "This could be fun",
        "positive",
        "Exploratory",
        "Light positive optimism.",
    ),
    SampleCase(
        "Everything feels pointless lately.",
        "negative",
        "Supportive",
        "Hopeless tone implies negative mood.",
    ),
    SampleCase(
        "I guess I'm okay, just tired.",
        "neutral",
        "Exploratory",
        "Neutral/low-energy without strong negative.",
    ),
    SampleCase(
        "Can't wait to share my progress.",
        "positive",
        "Exploratory",
        "Excited anticipation and eagerness.",
    ),
    SampleCase(
        "I'm worried this might not work out.",
        "negative",
        "Supportive",
        "Clear worry/anxiety about outcome.",
    ),
    SampleCase(
        "It's fine, I can handle it.",
        "neutral",
        "Exploratory",
        "Self-assured but emotionally neutral.",
    ),
]

EDGE_CASES: list[EdgeCase] = [
    EdgeCase(
        "Great, just great.",
        "Words are positive; tone may be negative.",
        "Prompt considers sarcasm; if confidence < 0.4, default Supportive.",
        "Add sarcasm detector and paralinguistic signals.",
    ),
    EdgeCase(
        "I'm fine.",
        "Commonly hides negative affect.",
        "Low confidence -> Supportive; gentle probing follow-up.",
        "Track history/patterns; ask empathetic clarifiers.",
    ),
    EdgeCase(
        "I'm excited but also nervous.",
        "Mixed positive/negative signals.",
        "Treat as mixed; prefer Supportive; surface rationale.",
        "Weighted moods and blended tones.",
    ),
    EdgeCase(
        "ok / sure",
        "Minimal signal; high ambiguity.",
        "Neutral with low confidence; exploratory + clarifier.",
        "Use recent context and user history; avoid overconfidence.",
    ),
    EdgeCase(
        "Maybe, or maybe not.",
        "Explicit ambivalence with no emotional valence.",
        "Treat as neutral, low confidence; ask for clarification.",
        "Leverage prior context to disambiguate; adjust confidence thresholds.",
    ),
    EdgeCase(
        "Yeah, whatever you think.",
        "Could be indifferent or dismissive; tone ambiguous.",
        "If confidence low, lean Supportive and check in.",
        "Model tone/intent separately; use history to see if this is irritation.",
    ),
    EdgeCase(
        "Sure, fine, I guess.",
        "Stacked hedges suggest resignation; could be neutral or negative.",
        "Bias toward Supportive when multiple hedges appear; note low confidence.",
        "Train rules or signals for hedging intensity; combine with user baseline.",
    ),
]
