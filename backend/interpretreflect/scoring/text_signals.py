from dataclasses import dataclass, field
from typing import Protocol

BURNOUT_KEYWORD_BANDS: list[tuple[tuple[str, ...], float, bool]] = [
    (("exhausted", "overwhelmed", "burnt out"), 8.0, True),
    (("tired", "stressed"), 6.0, False),
    (("good", "energized"), 3.0, False),
]

EMOTION_KEYWORDS: dict[str, tuple[str, ...]] = {
    "stressed": ("stress", "overwhelmed", "pressure"),
    "anxious": ("anxious", "worry", "nervous"),
    "calm": ("calm", "peaceful", "relaxed"),
    "energized": ("energized", "motivated", "excited"),
    "tired": ("tired", "exhausted", "fatigue"),
}

THEME_KEYWORDS: dict[str, tuple[str, ...]] = {
    "stress": ("stress", "overwhelmed", "anxious", "tired", "burnout"),
    "growth": ("learning", "improving", "progress", "better", "growth"),
}


@dataclass
class TextSignals:
    burnout_score: float | None = None
    recovery_needed: bool = False
    emotions: set[str] = field(default_factory=set)
    themes: set[str] = field(default_factory=set)


class TextSignalClassifier(Protocol):
    def classify(self, text: str) -> TextSignals:
        ...


class KeywordSignalClassifier:
    """Substring matching against a fixed vocabulary.

    Coarse by nature: it stands in for real sentiment inference and can be
    replaced by any object exposing ``classify``.
    """

    def __init__(
        self,
        burnout_bands: list[tuple[tuple[str, ...], float, bool]] | None = None,
        emotion_keywords: dict[str, tuple[str, ...]] | None = None,
        theme_keywords: dict[str, tuple[str, ...]] | None = None,
    ) -> None:
        self._burnout_bands = burnout_bands or BURNOUT_KEYWORD_BANDS
        self._emotion_keywords = emotion_keywords or EMOTION_KEYWORDS
        self._theme_keywords = theme_keywords or THEME_KEYWORDS

    def classify(self, text: str) -> TextSignals:
        lowered = (text or "").lower()
        signals = TextSignals()
        if not lowered.strip():
            return signals

        for keywords, score, recovery_needed in self._burnout_bands:
            if any(keyword in lowered for keyword in keywords):
                signals.burnout_score = score
                signals.recovery_needed = recovery_needed
                break

        signals.emotions = {
            emotion
            for emotion, keywords in self._emotion_keywords.items()
            if any(keyword in lowered for keyword in keywords)
        }
        signals.themes = {
            theme
            for theme, keywords in self._theme_keywords.items()
            if any(keyword in lowered for keyword in keywords)
        }
        return signals


DEFAULT_CLASSIFIER = KeywordSignalClassifier()
