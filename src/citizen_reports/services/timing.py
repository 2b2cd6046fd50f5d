"""Human-like read and typing delays for outgoing replies."""

import random
import re
from dataclasses import dataclass, field

_LONG_NUMBER = re.compile(r"\d{7,8}")


@dataclass(frozen=True)
class DelayProfile:
    """Delay constants, in seconds."""

    read_per_char: float = 0.06
    min_read: float = 1.0
    max_read: float = 4.0
    newline_bonus: float = 0.5
    long_number_bonus: float = 0.3
    many_words_bonus: float = 0.2
    many_words_threshold: int = 5
    read_jitter: float = 0.5
    typing_base: float = 2.0
    typing_per_char: float = 0.03
    min_typing: float = 2.0
    max_typing: float = 6.0
    typing_jitter: float = 1.0


@dataclass
class TimingSimulator:
    """Compute plausible delays from message length and shape.

    The simulator only computes durations; callers decide when to wait.
    Jitter makes results non-deterministic, so only their range is stable.
    """

    profile: DelayProfile = field(default_factory=DelayProfile)
    rng: random.Random = field(default_factory=random.Random)

    def read_delay(self, text: str) -> float:
        """Return how long a person would take to read an inbound message."""
        profile = self.profile
        base = max(len(text) * profile.read_per_char, profile.min_read)
        bonus = 0.0
        if "\n" in text:
            bonus += profile.newline_bonus
        if _LONG_NUMBER.search(text):
            bonus += profile.long_number_bonus
        if len(text.split()) > profile.many_words_threshold:
            bonus += profile.many_words_bonus
        total = min(base + bonus, profile.max_read)
        return total + self.rng.uniform(0, profile.read_jitter)

    def typing_delay(self, response_text: str) -> float:
        """Return how long a person would take to type the given reply."""
        profile = self.profile
        base = max(
            profile.typing_base + len(response_text) * profile.typing_per_char,
            profile.min_typing,
        )
        total = min(base, profile.max_typing)
        return total + self.rng.uniform(0, profile.typing_jitter)
