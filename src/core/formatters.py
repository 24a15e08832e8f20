#!/usr/bin/env python3
"""
Formatting and time utilities for alert display.
"""

import logging
from datetime import datetime
from typing import List, Optional

import pytz
from dateutil import parser as date_parser

from core.models import Alert

logger = logging.getLogger(__name__)

INVALID_TIME = "זמן לא תקין"

israel_tz = pytz.timezone('Asia/Jerusalem')


def parse_timestamp(timestamp: Optional[str]) -> Optional[datetime]:
    """Parse an alert timestamp into an aware UTC datetime, or None when invalid."""
    if not timestamp:
        return None
    try:
        dt = date_parser.parse(timestamp)
    except (ValueError, OverflowError, TypeError):
        return None
    if dt.tzinfo is None:
        dt = pytz.utc.localize(dt)
    return dt.astimezone(pytz.utc)


def _now(now: Optional[datetime]) -> datetime:
    if now is None:
        return datetime.now(pytz.utc)
    if now.tzinfo is None:
        return pytz.utc.localize(now)
    return now


def is_alert_recent(alert: Alert, hours: float = 24, now: Optional[datetime] = None) -> bool:
    """True when the alert's timestamp is valid, not in the future and at most ``hours`` old."""
    alert_time = parse_timestamp(alert.timestamp)
    if alert_time is None:
        logger.warning(f"Invalid date for alert: {alert.timestamp}")
        return False

    age_hours = (_now(now) - alert_time).total_seconds() / 3600
    if age_hours < 0:
        logger.warning(f"Alert appears to be from the future: {alert.timestamp}")
        return False

    return age_hours <= hours


def filter_recent_alerts(alerts: List[Alert], hours: float = 24, now: Optional[datetime] = None) -> List[Alert]:
    """Keep only recent alerts, preserving order."""
    return [alert for alert in alerts if is_alert_recent(alert, hours, now)]


def get_relative_time_string(timestamp: Optional[str], now: Optional[datetime] = None) -> str:
    """Hebrew relative time ("לפני 5 דקות"); invalid or future timestamps give "זמן לא תקין"."""
    alert_time = parse_timestamp(timestamp)
    if alert_time is None:
        return INVALID_TIME

    minutes = (_now(now) - alert_time).total_seconds() / 60
    if minutes < 0:
        return INVALID_TIME

    if minutes < 60:
        whole_minutes = int(minutes)
        return "כעת" if whole_minutes == 0 else f"לפני {whole_minutes} דקות"

    hours = minutes / 60
    if hours < 24:
        return f"לפני {int(hours)} שעות"

    return f"לפני {int(hours / 24)} ימים"


def format_alert(alert: Alert, now: Optional[datetime] = None) -> str:
    """Format a single alert for display."""
    alert_time = parse_timestamp(alert.timestamp)
    timestamp = alert_time.astimezone(israel_tz).strftime("%Y-%m-%d %H:%M") if alert_time else "?"
    relative = get_relative_time_string(alert.timestamp, now)

    return (f"[{timestamp}] [{alert.source}] 📍 {alert.location} ({relative})\n"
            f"    {alert.title}\n    {alert.link}\n")


def alerts_to_dict(alerts: List[Alert]) -> List[dict]:
    """Convert alerts to dictionaries for JSON output."""
    return [alert.to_dict() for alert in alerts]
