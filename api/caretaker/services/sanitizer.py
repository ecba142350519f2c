"""
Input sanitization.

Strips personal identifiers from user text before it leaves the system.
Detection and substitution share one ordered pattern table, so
contains_pii() and sanitize() always agree on a given input.

Placeholders are bracketed upper-case words with no digits or '@', so
no pattern can match an already-substituted placeholder.
"""

import re
from collections.abc import Iterable
from dataclasses import dataclass

from caretaker.models.chat import MedicationRecord, SanitizedMedication

SSN_PLACEHOLDER = "[SSN REMOVED]"
MEDICARE_PLACEHOLDER = "[MEDICARE ID REMOVED]"
CARD_PLACEHOLDER = "[CARD NUMBER REMOVED]"
PHONE_PLACEHOLDER = "[PHONE REMOVED]"
EMAIL_PLACEHOLDER = "[EMAIL REMOVED]"


@dataclass(frozen=True)
class PIIPattern:
    """A detection pattern and the placeholder that replaces its matches."""

    category: str
    pattern: re.Pattern
    placeholder: str


PII_PATTERNS: list[PIIPattern] = [
    # Email first: a ten-digit run inside an address would otherwise be taken
    # as a phone number and leave the rest of the address behind.
    PIIPattern(
        "email",
        re.compile(r"\b[A-Z0-9._%+-]+@[A-Z0-9.-]+\.[A-Z]{2,}\b", re.IGNORECASE),
        EMAIL_PLACEHOLDER,
    ),
    # Legacy Medicare IDs are an SSN with a letter suffix; must precede the SSN rule.
    PIIPattern("medicare", re.compile(r"\b\d{3}-\d{2}-\d{4}[A-Z]\b"), MEDICARE_PLACEHOLDER),
    PIIPattern("ssn", re.compile(r"\b\d{3}-\d{2}-\d{4}\b"), SSN_PLACEHOLDER),
    PIIPattern("ssn", re.compile(r"\b\d{9}\b"), SSN_PLACEHOLDER),
    PIIPattern("medicare", re.compile(r"\b[A-Z]\d{10}\b"), MEDICARE_PLACEHOLDER),
    PIIPattern(
        "card",
        re.compile(r"\b\d{4}[- ]?\d{4}[- ]?\d{4}[- ]?\d{4}\b"),
        CARD_PLACEHOLDER,
    ),
    PIIPattern("card", re.compile(r"\b\d{15,16}\b"), CARD_PLACEHOLDER),
    PIIPattern("phone", re.compile(r"\(\d{3}\)\s*\d{3}[-.]\d{4}\b"), PHONE_PLACEHOLDER),
    PIIPattern("phone", re.compile(r"\b\d{3}[-.]\d{3}[-.]\d{4}\b"), PHONE_PLACEHOLDER),
    PIIPattern("phone", re.compile(r"\b\d{10}\b"), PHONE_PLACEHOLDER),
]


def sanitize(text: str) -> str:
    """Replace every detected personal identifier with its placeholder."""
    for entry in PII_PATTERNS:
        text = entry.pattern.sub(entry.placeholder, text)
    return text


def contains_pii(text: str) -> bool:
    """Return True if any identifier pattern matches the (unsanitized) text."""
    return any(entry.pattern.search(text) for entry in PII_PATTERNS)


def detected_categories(text: str) -> list[str]:
    """Categories of identifiers present in the text, in table order, without repeats."""
    found: list[str] = []
    for entry in PII_PATTERNS:
        if entry.category not in found and entry.pattern.search(text):
            found.append(entry.category)
    return found


def sanitize_medication_context(
    medications: Iterable[MedicationRecord],
) -> list[SanitizedMedication]:
    """Keep only name, dose and frequency. Prescriber and notes never leave."""
    return [
        SanitizedMedication(name=med.name, dose=med.dose, frequency=med.frequency)
        for med in medications
    ]
