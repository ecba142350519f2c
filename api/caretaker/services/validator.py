"""
AI output validation.

The system prompt asks the model not to give medical advice, but nothing
forces it to comply. Every chat response is scanned here on the way out:

- Blocking tier: directive, diagnostic, reassuring or safety-claim language.
  One match replaces the whole response with SAFE_SUBSTITUTE.
- Warning tier: clinical-sounding terms that are allowed through but
  flagged for audit review.
"""

import logging
import re

from caretaker.models.safety import ValidationOutcome

logger = logging.getLogger(__name__)

BLOCKED_PREVIEW_CHARS = 100

_APOSTROPHE = "['’]"


def _compile(patterns: list[tuple[str, str]]) -> list[tuple[str, re.Pattern]]:
    return [(name, re.compile(pattern, re.IGNORECASE)) for name, pattern in patterns]


BLOCKING_PATTERNS = _compile(
    [
        # Medical advice
        ("advice_you_should", r"you (should|must|need to) (take|stop|increase|decrease|skip)"),
        ("advice_i_recommend", r"I (recommend|suggest|advise) (taking|stopping|changing)"),
        ("advice_change_medication", r"(start|stop|change) (taking|your) (medication|medicine|dose)"),
        ("advice_dosage", r"take \d+ ?(mg|milligrams|pills|tablets)"),
        # Diagnosis
        ("diagnosis_this_indicates", r"this (indicates|suggests|means you have|shows you have)"),
        ("diagnosis_you_likely_have", r"you (probably|likely|might|may) have"),
        ("diagnosis_sounds_like", r"sounds like (you have|a case of)"),
        ("diagnosis_i_think", r"I (think|believe) you have"),
        ("diagnosis_suffering", rf"you({_APOSTROPHE}re| are) (suffering from|experiencing)"),
        # False reassurance
        ("reassurance_dont_worry", rf"don{_APOSTROPHE}t worry about"),
        ("reassurance_nothing_to_worry", r"nothing to worry about"),
        ("reassurance_be_fine", rf"you({_APOSTROPHE}ll| will) be fine"),
        ("reassurance_its_nothing", rf"it{_APOSTROPHE}s (probably )?nothing"),
        # Safety claims
        ("safety_safe_to", r"safe to (take|stop|mix|combine)"),
        ("safety_wont_harm", rf"won{_APOSTROPHE}t (hurt|harm|affect)"),
        ("safety_no_risk", r"no (risk|danger|harm) in"),
    ]
)

WARNING_PATTERNS = _compile(
    [
        ("normal_range", r"normal range"),
        ("side_effect", r"side effect"),
        ("interaction", r"interact"),
        ("overdose", r"overdose"),
        ("withdrawal", r"withdrawal"),
    ]
)

SAFE_SUBSTITUTE = """\
I want to be careful here. This sounds like something to discuss with your \
healthcare provider, as I'm not qualified to give medical advice.

Would you like help preparing questions for your doctor or pharmacist?"""


def _matching(patterns: list[tuple[str, re.Pattern]], text: str) -> list[str]:
    return [name for name, pattern in patterns if pattern.search(text)]


def validate(response_text: str) -> ValidationOutcome:
    """Scan a model response and classify it as blocked, warning or clean."""
    blocked_flags = _matching(BLOCKING_PATTERNS, response_text)
    if blocked_flags:
        return ValidationOutcome(
            safe=False,
            severity="blocked",
            flags=blocked_flags,
            original_response=response_text,
        )

    warning_flags = _matching(WARNING_PATTERNS, response_text)
    if warning_flags:
        return ValidationOutcome(
            safe=True,
            severity="warning",
            flags=warning_flags,
            original_response=response_text,
        )

    return ValidationOutcome(
        safe=True, severity="clean", flags=[], original_response=response_text
    )


def substitute(blocked_response: str, flags: list[str]) -> str:
    """
    Return the fixed safe message for a blocked response.

    The flags and a short preview go to the operational log for debugging.
    They are never written to the audit trail.
    """
    logger.warning(
        "Response blocked: flags=%s preview=%r",
        flags,
        blocked_response[:BLOCKED_PREVIEW_CHARS],
    )
    return SAFE_SUBSTITUTE
