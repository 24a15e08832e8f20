#!/usr/bin/env python3
"""
OpenAI integration for security-event classification.

Sends a feed item's text to the chat completions API with a JSON schema
response format and returns the parsed classification.
"""

import os
import json
import logging
from typing import List, Dict, Optional, Any

from openai import OpenAI

from core.classification.prompts import SYSTEM_PROMPT, CLASSIFICATION_SCHEMA, get_classification_prompt
from core.exceptions import LLMError, ClassificationParseError
from core.text_sanitizer import preprocess_llm_response

logger = logging.getLogger(__name__)


class OpenAIClient:
    """Client for OpenAI API integration with structured outputs."""

    def __init__(self, api_key: Optional[str] = None, model: str = "gpt-4o-mini"):
        """
        Initialize OpenAI client.

        Args:
            api_key: OpenAI API key. If None, tries to get from environment.
            model: Chat model used for classification
        """
        api_key = api_key or os.getenv('OPENAI_API_KEY')
        if not api_key:
            raise ValueError("OpenAI API key not provided and not found in OPENAI_API_KEY environment variable")

        self.client = OpenAI(api_key=api_key)
        self.model = model
        self.max_tokens = 200
        self.temperature = 0

    def _make_structured_request(self, messages: List[Dict[str, str]], schema: Dict[str, Any],
                                 analysis_type: str = "unknown") -> str:
        """Make a structured request and return the raw message content."""
        logger.debug(f"Making OpenAI structured API call for {analysis_type}")

        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=messages,
                max_tokens=self.max_tokens,
                temperature=self.temperature,
                response_format={
                    "type": "json_schema",
                    "json_schema": {
                        "name": f"{analysis_type}_response",
                        "schema": schema,
                        "strict": True
                    }
                }
            )
        except Exception as e:
            logger.error(f"OpenAI structured API request failed: {e}")
            raise LLMError("openai", self.model, e) from e

        if not response.choices:
            raise LLMError("openai", self.model, ValueError("empty choices"))

        finish_reason = getattr(response.choices[0], "finish_reason", None)
        if finish_reason == "length":
            logger.error(
                "OpenAI response for %s was truncated due to max_tokens=%s.",
                analysis_type,
                self.max_tokens,
            )
            raise LLMError("openai", self.model, ValueError("response truncated (finish_reason=length)"))

        content = response.choices[0].message.content or ""
        usage = getattr(response, "usage", None)
        if usage is not None:
            logger.debug(f"OpenAI call tokens: {usage.prompt_tokens} prompt + "
                         f"{usage.completion_tokens} completion = {usage.total_tokens} total")
        return content

    def classify_security_event(self, text: str) -> Dict[str, Any]:
        """
        Classify a title + description text.

        Args:
            text: Feed item text

        Returns:
            Dict with ``is_security_event`` (bool) and ``location`` (str or None)

        Raises:
            LLMError: API call failed
            ClassificationParseError: Response was not the expected JSON
        """
        messages = [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": get_classification_prompt(text)}
        ]

        content = self._make_structured_request(messages, CLASSIFICATION_SCHEMA, "security_classification")
        logger.info(f"AI response for \"{text[:60]}\": {content}")

        try:
            result = json.loads(preprocess_llm_response(content))
        except (TypeError, ValueError) as e:
            raise ClassificationParseError(content, e) from e

        if not isinstance(result, dict) or "is_security_event" not in result:
            raise ClassificationParseError(content, ValueError("missing is_security_event"))

        return result

    def test_connection(self) -> bool:
        """Test OpenAI API connection."""
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": "Hello"}],
                max_tokens=5
            )
        except Exception as e:
            logger.error(f"OpenAI API connection test failed: {e}")
            return False

        if response and response.choices:
            logger.info("OpenAI API connection test successful")
            return True

        logger.error("OpenAI API connection test failed: no response")
        return False
