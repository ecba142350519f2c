"""
Unit tests for input sanitization.
"""

import pytest

from caretaker.models.chat import MedicationRecord
from caretaker.services.sanitizer import (
    CARD_PLACEHOLDER,
    EMAIL_PLACEHOLDER,
    MEDICARE_PLACEHOLDER,
    PHONE_PLACEHOLDER,
    SSN_PLACEHOLDER,
    contains_pii,
    detected_categories,
    sanitize,
    sanitize_medication_context,
)


class TestSanitize:
    @pytest.mark.parametrize(
        "text, secret, placeholder",
        [
            ("My SSN is 123-45-6789.", "123-45-6789", SSN_PLACEHOLDER),
            ("SSN 123456789 on file", "123456789", SSN_PLACEHOLDER),
            ("Medicare number A1234567890", "A1234567890", MEDICARE_PLACEHOLDER),
            ("Old Medicare ID 123-45-6789A", "123-45-6789A", MEDICARE_PLACEHOLDER),
            ("Card 4111-1111-1111-1111 was charged", "4111-1111-1111-1111", CARD_PLACEHOLDER),
            ("Card 4111 1111 1111 1111 was charged", "4111 1111 1111 1111", CARD_PLACEHOLDER),
            ("Amex 378282246310005 expired", "378282246310005", CARD_PLACEHOLDER),
            ("Call (555) 123-4567 tomorrow", "(555) 123-4567", PHONE_PLACEHOLDER),
            ("Call 555.123.4567 tomorrow", "555.123.4567", PHONE_PLACEHOLDER),
            ("Call 555-123-4567 tomorrow", "555-123-4567", PHONE_PLACEHOLDER),
            ("Call 5551234567 tomorrow", "5551234567", PHONE_PLACEHOLDER),
            ("Write to jane.doe@example.com please", "jane.doe@example.com", EMAIL_PLACEHOLDER),
        ],
    )
    def test_replaces_identifier_with_placeholder(self, text, secret, placeholder):
        result = sanitize(text)
        assert secret not in result
        assert placeholder in result
        assert contains_pii(text)

    def test_government_id_digits_never_survive(self):
        """Any SSN-shaped sequence is removed and reported."""
        for ssn in ["001-23-4567", "987-65-4321", "555-00-1111"]:
            text = f"please file claim for {ssn} today"
            assert ssn not in sanitize(text)
            assert ssn.replace("-", "") not in sanitize(text)
            assert contains_pii(text)

    def test_email_with_digit_run_is_removed_whole(self):
        result = sanitize("reach me at bob5551234567@mail.com")
        assert result == f"reach me at {EMAIL_PLACEHOLDER}"

    def test_text_without_pii_is_unchanged(self):
        text = "I take 20 mg of lisinopril every morning at 8."
        assert sanitize(text) == text
        assert not contains_pii(text)

    @pytest.mark.parametrize(
        "text",
        [
            "SSN 123-45-6789, card 4111111111111111, phone (555) 123-4567",
            "email a@b.co and medicare A1234567890 and 123456789",
            "nothing sensitive here",
            "",
        ],
    )
    def test_sanitize_is_idempotent(self, text):
        once = sanitize(text)
        assert sanitize(once) == once
        assert not contains_pii(once)

    def test_placeholders_are_not_pii(self):
        for placeholder in [
            SSN_PLACEHOLDER,
            MEDICARE_PLACEHOLDER,
            CARD_PLACEHOLDER,
            PHONE_PLACEHOLDER,
            EMAIL_PLACEHOLDER,
        ]:
            assert not contains_pii(placeholder)

    def test_detected_categories(self):
        text = "SSN 123-45-6789 and phone 555-123-4567 and 987-65-4321"
        assert detected_categories(text) == ["ssn", "phone"]


class TestSanitizeMedicationContext:
    def test_strips_doctor_and_notes(self):
        meds = [
            MedicationRecord(
                name="Metformin",
                dose="500 mg",
                frequency="twice daily",
                doctor="Dr. Alice Smith",
                notes="Lives alone, daughter calls on Sundays",
            )
        ]
        safe = sanitize_medication_context(meds)
        dumped = safe[0].model_dump()
        assert dumped == {"name": "Metformin", "dose": "500 mg", "frequency": "twice daily"}

    def test_frequency_is_optional(self):
        safe = sanitize_medication_context([MedicationRecord(name="Aspirin", dose="81 mg")])
        assert safe[0].frequency is None
