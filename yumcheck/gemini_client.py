import logging
import os
from typing import Optional

import google.generativeai as genai

from .errors import TextRecognitionError, TextRecognitionErrorKind

logger = logging.getLogger(__name__)

TEXT_RECOGNITION_PROMPT = """
Transcribe all printed text visible on this cosmetic product label.
Keep the original reading order (top to bottom, left to right) and the original punctuation,
especially the commas separating ingredients.
Respond with the transcribed text only, no commentary.
If there is no readable text, respond with an empty message.
"""


class GeminiClient:
    def __init__(self, api_key: Optional[str] = None, model_name: Optional[str] = None):
        self.api_key = api_key or os.getenv("GEMINI_API_KEY")
        self.model_name = model_name or os.getenv("GEMINI_MODEL", "gemini-2.0-flash")
        if self.api_key:
            genai.configure(api_key=self.api_key)
            self.model = genai.GenerativeModel(self.model_name)
        else:
            self.model = None

    def extract_text(self, image_bytes: bytes, mime_type: str = "image/jpeg") -> str:
        """Run text recognition on a label photo and return the raw text."""
        if not self.model:
            logger.warning("Gemini API not configured - text recognition unavailable")
            raise TextRecognitionError(TextRecognitionErrorKind.NOT_CONFIGURED)

        try:
            response = self.model.generate_content(
                [TEXT_RECOGNITION_PROMPT, {"mime_type": mime_type, "data": image_bytes}]
            )
            text = response.text.strip()
        except Exception as e:
            # The SDK raises several unrelated exception types (blocked prompts, API errors)
            logger.error("Gemini text recognition failed: %s", e)
            raise TextRecognitionError(TextRecognitionErrorKind.PROCESSING_FAILED, str(e)) from e

        logger.info("Gemini returned %d characters of label text", len(text))
        if not text:
            raise TextRecognitionError(TextRecognitionErrorKind.NO_TEXT_FOUND)
        return text
