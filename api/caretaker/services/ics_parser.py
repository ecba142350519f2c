"""
iCalendar (RFC 5545) parsing.

Turns .ics text into flat event records using the icalendar library.
"""

import logging
from datetime import date, datetime

from icalendar import Calendar
from icalendar.error import BrokenCalendarProperty

from caretaker.models.content import ExtractedAppointment, ParsedIcsEvent

logger = logging.getLogger(__name__)


def _text(component, name: str) -> str | None:
    value = component.get(name)
    if value is None:
        return None
    return str(value).strip() or None


def _split(value: date | datetime | None) -> tuple[str | None, str | None]:
    """ISO date plus HH:MM time; all-day values have no time."""
    if value is None:
        return None, None
    if isinstance(value, datetime):
        return value.date().isoformat(), value.strftime("%H:%M")
    return value.isoformat(), None


def _organizer(component) -> str | None:
    organizer = _text(component, "ORGANIZER")
    if organizer and organizer.lower().startswith("mailto:"):
        organizer = organizer[len("mailto:"):]
    return organizer or None


def _to_event(component) -> ParsedIcsEvent:
    start = component.get("DTSTART")
    start_value = start.dt if start is not None else None

    end = component.get("DTEND")
    end_value = end.dt if end is not None else None
    duration = component.get("DURATION")
    if end_value is None and start_value is not None and duration is not None:
        end_value = start_value + duration.dt

    start_date, start_time = _split(start_value)
    end_date, end_time = _split(end_value)

    return ParsedIcsEvent(
        summary=_text(component, "SUMMARY"),
        location=_text(component, "LOCATION"),
        description=_text(component, "DESCRIPTION"),
        start_date=start_date,
        start_time=start_time,
        end_date=end_date,
        end_time=end_time,
        organizer=_organizer(component),
        uid=_text(component, "UID"),
    )


def parse_ics(content: str) -> list[ParsedIcsEvent]:
    """
    Parse calendar text and return every readable VEVENT.

    Malformed input is logged and yields an empty list. An event whose
    date or duration cannot be read is skipped.
    """
    try:
        calendar = Calendar.from_ical(content)
    except (ValueError, BrokenCalendarProperty):
        logger.exception("Failed to parse ICS content")
        return []

    events = []
    for component in calendar.walk("VEVENT"):
        try:
            events.append(_to_event(component))
        except (ValueError, TypeError, BrokenCalendarProperty):
            logger.warning("Skipping unreadable ICS event", exc_info=True)

    logger.info("Parsed %d events from ICS content", len(events))
    return events


def ics_event_to_appointment(event: ParsedIcsEvent) -> ExtractedAppointment:
    """Map a calendar event onto appointment fields. Parsed data is high confidence."""
    return ExtractedAppointment(
        doctor=event.summary,
        location=event.location,
        date=event.start_date,
        time=event.start_time,
        notes=event.description,
        confidence="high",
    )
