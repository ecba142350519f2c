"""
Emergency keyword detection.

Runs on the raw user message before sanitization and before any model call.
A match ends the request with a fixed, human-written response.
Recall is favoured over precision: a false alarm costs a redirect, a miss
could cost much more.
"""

import re

_APOSTROPHE = "['’]?"

# (identifier, pattern) pairs, checked case-insensitively
EMERGENCY_PATTERNS: list[tuple[str, re.Pattern]] = [
    (name, re.compile(pattern, re.IGNORECASE))
    for name, pattern in [
        ("chest_pain", r"chest (pain|pressure|tightness)"),
        ("breathing", rf"(can{_APOSTROPHE}t|cannot|can not) breathe"),
        ("breathing", r"(difficulty|trouble|hard time) breathing"),
        ("breathing", r"not breathing|stopped breathing|short(ness)? of breath"),
        ("heart_attack", r"heart attack"),
        ("stroke", r"stroke"),
        ("self_harm", r"suicid(e|al)"),
        ("self_harm", r"kill(ing)? myself"),
        ("self_harm", r"end (my|my own) life|end it all"),
        ("self_harm", r"want(ed)? to die"),
        ("self_harm", r"(hurt|harm)(ing)? myself|self[- ]harm"),
        ("overdose", r"overdos(e|ed|ing)"),
        ("overdose", r"took too (much|many)"),
        ("bleeding", rf"bleeding (heavily|badly|a lot|won{_APOSTROPHE}t stop)"),
        ("bleeding", rf"(can{_APOSTROPHE}t|cannot) stop (the )?bleeding"),
        ("unconscious", r"unconscious|unresponsive"),
        ("unconscious", r"passed out|fainted"),
        ("seizure", r"seizure"),
    ]
]

EMERGENCY_RESPONSE = """\
This sounds like it may need immediate medical attention.

**If this is an emergency, please:**
- Call **911** immediately
- Go to your nearest emergency room
- Call Poison Control at **1-800-222-1222** if related to medication

**For mental health crisis:**
- Call or text **988** (Suicide & Crisis Lifeline)

Your health and safety come first. I'm here to help with organization tasks \
once you've gotten the care you need."""


def emergency_matches(text: str) -> list[str]:
    """Identifiers of every emergency pattern found in the text, without repeats."""
    found: list[str] = []
    for name, pattern in EMERGENCY_PATTERNS:
        if name not in found and pattern.search(text):
            found.append(name)
    return found


def is_emergency(text: str) -> bool:
    """Return True if the text contains any emergency phrase."""
    return any(pattern.search(text) for _, pattern in EMERGENCY_PATTERNS)


def get_emergency_response() -> str:
    """The fixed emergency guidance. Never generated by the model."""
    return EMERGENCY_RESPONSE
