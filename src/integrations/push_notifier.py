#!/usr/bin/env python3
"""
Push notification service for mobile alerts.

Delivers a single notification to a single user, either through the
Supabase ``send-notification`` edge function or directly through Firebase
Cloud Messaging.
"""

import os
import logging
from typing import Dict, Any, Optional

import requests

from core.exceptions import NotificationChannelError
from core.models import UserLocationProfile

logger = logging.getLogger(__name__)

EDGE_FUNCTION_NAME = "send-notification"
FCM_ENDPOINT = "https://fcm.googleapis.com/fcm/send"


class PushNotifier:
    """Handles push notifications via the configured provider."""

    def __init__(self,
                 provider: str = "supabase",
                 supabase_url: Optional[str] = None,
                 service_key: Optional[str] = None,
                 firebase_server_key: Optional[str] = None,
                 session: Optional[requests.Session] = None,
                 timeout: int = 10):
        """
        Initialize push notifier.

        Args:
            provider: Push service provider ('supabase', 'firebase')
            supabase_url: Project URL for the edge function
            service_key: Supabase service role key
            firebase_server_key: FCM server key
            session: HTTP session (injected by tests)
        """
        self.provider = provider.lower()
        self.session = session or requests.Session()
        self.timeout = timeout

        if self.provider == "supabase":
            base_url = (supabase_url or os.getenv('SUPABASE_URL') or '').rstrip('/')
            self.service_key = service_key or os.getenv('SUPABASE_SERVICE_KEY')
            self.endpoint = f"{base_url}/functions/v1/{EDGE_FUNCTION_NAME}"
        elif self.provider == "firebase":
            self.server_key = firebase_server_key or os.getenv('FIREBASE_SERVER_KEY')
            self.endpoint = FCM_ENDPOINT

    def send(self, recipient: UserLocationProfile, title: str, body: str,
             data: Optional[Dict[str, Any]] = None) -> bool:
        """
        Send one notification.

        Returns:
            True when the provider accepted the notification

        Raises:
            NotificationChannelError: The provider could not be reached
        """
        if self.provider == "supabase":
            return self._send_supabase(recipient, title, body, data or {})
        elif self.provider == "firebase":
            return self._send_firebase(recipient, title, body, data or {})

        logger.warning(f"Unsupported push provider: {self.provider}")
        return False

    def _post(self, payload: Dict[str, Any], headers: Dict[str, str], label: str) -> bool:
        try:
            response = self.session.post(
                self.endpoint,
                json=payload,
                headers=headers,
                timeout=self.timeout
            )
        except requests.RequestException as e:
            logger.error(f"Failed to send {label} notification: {e}")
            raise NotificationChannelError(label, 'send', e) from e

        if 200 <= response.status_code < 300:
            return True

        logger.error(f"{label} API error: {response.status_code} - {response.text}")
        return False

    def _send_supabase(self, recipient: UserLocationProfile, title: str, body: str,
                       data: Dict[str, Any]) -> bool:
        """Send via the Supabase edge function."""
        if not self.service_key:
            logger.warning("Supabase service key not configured")
            return False

        payload = {
            "user_id": recipient.user_id,
            "title": title,
            "body": body,
            "data": data
        }
        headers = {
            "Authorization": f"Bearer {self.service_key}",
            "Content-Type": "application/json"
        }
        return self._post(payload, headers, "Supabase")

    def _send_firebase(self, recipient: UserLocationProfile, title: str, body: str,
                       data: Dict[str, Any]) -> bool:
        """Send via Firebase Cloud Messaging."""
        if not self.server_key:
            logger.warning("Firebase server key not configured")
            return False

        if not recipient.fcm_token:
            logger.warning(f"User {recipient.user_id} has no push token")
            return False

        payload = {
            "to": recipient.fcm_token,
            "priority": "high",
            "notification": {
                "title": title,
                "body": body,
                "sound": "default"
            },
            "data": data
        }
        headers = {
            "Authorization": f"key={self.server_key}",
            "Content-Type": "application/json"
        }
        return self._post(payload, headers, "Firebase")

    def is_configured(self) -> bool:
        """Check if push service is properly configured."""
        if self.provider == "supabase":
            return bool(self.service_key)
        elif self.provider == "firebase":
            return bool(self.server_key)
        return False
