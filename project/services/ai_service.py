"""Gemini AI service used by the generation, resume and feedback collaborators."""
import logging
import time

from google import genai
from google.genai import types
from google.genai.errors import ClientError
from google.genai.types import HttpOptions

from config.settings import PROJECT_ID, LOCATION, GEMINI_MODEL, USE_VERTEX, API_KEY, validate_config

logger = logging.getLogger(__name__)

_genai_client = None


class AIServiceError(RuntimeError):
    pass


def get_genai_client():
    """Create the Gemini client on first use."""
    global _genai_client
    if _genai_client is None:
        validate_config()
        if USE_VERTEX == "1":
            _genai_client = genai.Client(
                vertexai=True,
                project=PROJECT_ID,
                location=LOCATION,
                http_options=HttpOptions(api_version="v1"),
            )
            logger.info("Using Vertex AI (v1) via ADC")
        else:
            _genai_client = genai.Client(api_key=API_KEY)
            logger.info("Using AI Studio API key")
    return _genai_client


class AIService:
    """Handles AI model interactions."""

    RATE_LIMIT_RETRIES = 2

    @staticmethod
    def _generate(contents, config, model=None):
        client = get_genai_client()
        last_error = None
        for attempt in range(AIService.RATE_LIMIT_RETRIES + 1):
            try:
                return client.models.generate_content(
                    model=model or GEMINI_MODEL,
                    contents=contents,
                    config=config,
                )
            except ClientError as e:
                last_error = e
                if "RESOURCE_EXHAUSTED" in str(e) or getattr(e, "code", None) == 429:
                    time.sleep(0.9 * (attempt + 1))
                    continue
                break
        raise AIServiceError(f"Gemini request failed: {last_error}") from last_error

    @staticmethod
    def generate_text(prompt: str, temperature: float = 0.7, max_tokens: int = 1000, model=None) -> str:
        """Generate plain text. Raises AIServiceError when nothing usable comes back."""
        resp = AIService._generate(
            prompt,
            types.GenerateContentConfig(temperature=temperature, max_output_tokens=max_tokens),
            model=model,
        )
        txt = (getattr(resp, "text", "") or "").strip()
        if not txt:
            raise AIServiceError("Gemini returned empty text")
        return txt

    @staticmethod
    def generate_structured(prompt: str, schema, system: str = None, temperature: float = 0.3, model=None):
        """Generate JSON matching a pydantic schema and return the parsed model."""
        resp = AIService._generate(
            prompt,
            types.GenerateContentConfig(
                temperature=temperature,
                system_instruction=system,
                response_mime_type="application/json",
                response_schema=schema,
            ),
            model=model,
        )
        parsed = getattr(resp, "parsed", None)
        if isinstance(parsed, schema):
            return parsed
        txt = (getattr(resp, "text", "") or "").strip()
        if not txt:
            raise AIServiceError("Gemini returned no structured output")
        try:
            return schema.model_validate_json(txt)
        except ValueError as e:
            raise AIServiceError(f"Structured output did not match schema: {e}") from e
