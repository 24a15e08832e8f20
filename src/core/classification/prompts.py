#!/usr/bin/env python3
"""
Prompt and structured-output schema for security classification.
"""

from typing import Dict, Any

SYSTEM_PROMPT = "אתה מסווג חדשות ביטחוניות בישראל. ענה ב-JSON בלבד."

CLASSIFICATION_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "is_security_event": {
            "type": "boolean",
            "description": "האם מדובר באירוע ביטחוני"
        },
        "location": {
            "type": ["string", "null"],
            "description": "שם המקום הספציפי בישראל או null"
        }
    },
    "required": ["is_security_event", "location"],
    "additionalProperties": False
}


def get_classification_prompt(text: str) -> str:
    """Build the Hebrew classification prompt for a title + description text."""
    return f"""
טקסט: "{text}"

אנא בחן את הטקסט הזה ובצע סיווג מדויק:

1. האם מדובר באירוע ביטחוני? (פיגוע, טרור, ירי, טילים, רקטות, צבע אדום, פעילות צבאית)
2. אם מוזכר מיקום ספציפי בישראל (עיר, יישוב, אזור), כתוב את שם המקום הספציפי בלבד
3. אם המיקום לא ברור או לא קיים - כתוב null

חשוב מאוד:
- רק אירועי ביטחון אמיתיים צריכים להיחשב כ-true
- חדשות פוליטיות, כלכליות או ספורט אינן אירועי ביטחון
- רק מיקומים ספציפיים בישראל צריכים להיזכר

ענה בדיוק בפורמט JSON הבא:
{{
  "is_security_event": true/false,
  "location": "שם המקום הספציפי או null"
}}
"""
