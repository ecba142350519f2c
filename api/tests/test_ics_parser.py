"""
Unit tests for the iCalendar parser.
"""

from caretaker.services.ics_parser import ics_event_to_appointment, parse_ics

TIMED_EVENT = """\
BEGIN:VCALENDAR
VERSION:2.0
PRODID:-//Clinic//Scheduler//EN
BEGIN:VEVENT
UID:appt-123@clinic.example
DTSTAMP:20250301T120000Z
DTSTART:20250312T093000
DTEND:20250312T100000
SUMMARY:Dr. Patel - Cardiology follow-up
LOCATION:Heart Center\\, Suite 4
DESCRIPTION:Bring your medication list.
ORGANIZER;CN=Front Desk:mailto:frontdesk@clinic.example
END:VEVENT
END:VCALENDAR
"""

ALL_DAY_AND_DURATION = """\
BEGIN:VCALENDAR
VERSION:2.0
PRODID:-//Clinic//Scheduler//EN
BEGIN:VEVENT
UID:lab-1
DTSTAMP:20250301T120000Z
DTSTART;VALUE=DATE:20250320
SUMMARY:Fasting lab work
END:VEVENT
BEGIN:VEVENT
UID:pt-1
DTSTAMP:20250301T120000Z
DTSTART:20250321T140000
DURATION:PT45M
SUMMARY:Physical therapy
END:VEVENT
END:VCALENDAR
"""


class TestParseIcs:
    def test_timed_event(self):
        events = parse_ics(TIMED_EVENT)
        assert len(events) == 1
        event = events[0]
        assert event.summary == "Dr. Patel - Cardiology follow-up"
        assert event.location == "Heart Center, Suite 4"
        assert event.description == "Bring your medication list."
        assert event.start_date == "2025-03-12"
        assert event.start_time == "09:30"
        assert event.end_date == "2025-03-12"
        assert event.end_time == "10:00"
        assert event.organizer == "frontdesk@clinic.example"
        assert event.uid == "appt-123@clinic.example"

    def test_all_day_event_has_no_time(self):
        lab, therapy = parse_ics(ALL_DAY_AND_DURATION)
        assert lab.start_date == "2025-03-20"
        assert lab.start_time is None
        assert lab.end_date is None
        assert lab.organizer is None

    def test_end_computed_from_duration(self):
        _, therapy = parse_ics(ALL_DAY_AND_DURATION)
        assert therapy.end_date == "2025-03-21"
        assert therapy.end_time == "14:45"

    def test_malformed_input_returns_empty_list(self):
        assert parse_ics("this is not a calendar") == []
        assert parse_ics("") == []


def test_event_to_appointment():
    event = parse_ics(TIMED_EVENT)[0]
    appointment = ics_event_to_appointment(event)

    assert appointment.doctor == "Dr. Patel - Cardiology follow-up"
    assert appointment.location == "Heart Center, Suite 4"
    assert appointment.date == "2025-03-12"
    assert appointment.time == "09:30"
    assert appointment.notes == "Bring your medication list."
    assert appointment.specialty is None
    assert appointment.phone is None
    assert appointment.confidence == "high"


BROKEN_START = """\
BEGIN:VCALENDAR
VERSION:2.0
PRODID:-//Clinic//Scheduler//EN
BEGIN:VEVENT
UID:bad-start
DTSTAMP:20250301T120000Z
DTSTART:notadate
SUMMARY:Dentist
END:VEVENT
END:VCALENDAR
"""

BROKEN_DURATION = """\
BEGIN:VCALENDAR
VERSION:2.0
PRODID:-//Clinic//Scheduler//EN
BEGIN:VEVENT
UID:bad-duration
DTSTAMP:20250301T120000Z
DTSTART:20250321T140000
DURATION:garbage
SUMMARY:Physical therapy
END:VEVENT
END:VCALENDAR
"""


class TestUnreadableEvents:
    def test_bad_start_date_is_skipped(self):
        assert parse_ics(BROKEN_START) == []

    def test_bad_duration_is_skipped(self):
        assert parse_ics(BROKEN_DURATION) == []
