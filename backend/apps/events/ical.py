from __future__ import annotations

from datetime import timedelta
from typing import Iterable
from urllib.parse import urlparse

from django.conf import settings
from django.utils import timezone
from django.utils.text import slugify
from icalendar import Alarm, Calendar
from icalendar import Event as CalendarEvent

DEFAULT_REMINDER_MINUTES = (15, 60, 1440)
MAX_REMINDER_MINUTES = 4 * 7 * 1440
MAX_REMINDERS = 10

PRODID = "-//Community Events//Ticketing//EN"


def event_url(event_id: int) -> str:
    return f"{settings.FRONTEND_BASE_URL}/events/{event_id}"


def calendar_filename(title: str) -> str:
    return f"{slugify(title) or 'event'}.ics"


def build_event_calendar(event, reminders: Iterable[int] = DEFAULT_REMINDER_MINUTES) -> bytes:
    """Render a single-event VCALENDAR with one display alarm per reminder.

    ``reminders`` are minutes before the start of the event.
    """
    url = event_url(event.id)
    host = urlparse(settings.FRONTEND_BASE_URL).hostname or "localhost"

    entry = CalendarEvent()
    entry.add("uid", f"event-{event.id}@{host}")
    entry.add("dtstamp", timezone.now())
    entry.add("dtstart", event.start_date)
    entry.add("dtend", event.end_date)
    entry.add("summary", event.title)
    entry.add("description", event.description)
    entry.add("location", event.location)
    entry.add("url", url)
    entry.add("status", "CONFIRMED")
    entry.add("transp", "OPAQUE")
    owner = event.owner
    if owner.email:
        entry.add(
            "organizer",
            f"mailto:{owner.email}",
            parameters={"cn": owner.name or owner.username},
        )

    for minutes in reminders:
        alarm = Alarm()
        alarm.add("action", "DISPLAY")
        alarm.add("description", f"Reminder: {event.title}")
        alarm.add("trigger", timedelta(minutes=-minutes))
        entry.add_component(alarm)

    cal = Calendar()
    cal.add("prodid", PRODID)
    cal.add("version", "2.0")
    cal.add("method", "PUBLISH")
    cal.add_component(entry)
    return cal.to_ical()
