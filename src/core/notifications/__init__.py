#!/usr/bin/env python3
"""
Notification fan-out for new alerts.
"""

from .dispatcher import AlertNotificationDispatcher, notification_title

__all__ = ['AlertNotificationDispatcher', 'notification_title']
