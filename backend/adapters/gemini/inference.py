"""GeminiInferenceAdapter — video analysis through the Gemini generateContent REST API.

The video travels inline as base64 next to an analysis prompt, and the
response is constrained to a JSON schema that mirrors AnalysisResponse.
Every service-side problem (HTTP status, transport, malformed JSON,
schema mismatch) surfaces as InferenceError so the dispatch loop can
substitute a placeholder for the segment.
"""

import json
import logging
from typing import Optional

import httpx
from pydantic import ValidationError

from domain.models import AnalysisHints, AnalysisResult, SegmentPayload
from errors import ConfigurationError, InferenceError
from mappers import dto_to_result
from models import AnalysisResponse
from ports.inference import InferencePort

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gemini-3-flash-preview"
DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_TIMEOUT = 600.0

PROMPT_TEMPLATE = """
Analyze this video for AI Avatar training and Vector Database (RAG) indexing.

SPECIAL INSTRUCTION FOR MULTI-LINGUAL CONTENT:
This video may contain multiple languages or code-switching (shifting between languages mid-conversation).
1. Provide a verbatim, word-for-word transcript in the ORIGINAL language spoken for every segment.
2. Do NOT translate the spoken words; capture them exactly as uttered.
3. In the metadata, list all detected languages used in the video.

CRITICAL REQUIREMENT:
Provide a highly granular transcript where each entry is a single sentence or a short phrase.
Each entry MUST have an accurate start timestamp (format MM:SS).

Provided Context:
- Project Title: {title}
- Primary Speaker: {speaker_name}
- Domain/Category: {category}

Please extract:
1. Metadata:
   - A concise summary optimized for vector search.
   - A set of 10-15 high-relevance keywords/tags.
   - Language(s): Identify all languages used (e.g., "English, Spanish, Mandarin").
2. Granular Transcript:
   - Timestamp: Accurate start time.
   - Speaker: Identified speaker.
   - Text: Verbatim text in the original language.
   - Tone: Emotional state.
   - Intent: Functional purpose.

Return the result in JSON format strictly following the schema.
"""

_STRING = {"type": "STRING"}

RESPONSE_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "metadata": {
            "type": "OBJECT",
            "properties": {
                "title": _STRING,
                "speakerName": _STRING,
                "category": _STRING,
                "language": _STRING,
                "tags": {"type": "ARRAY", "items": _STRING},
                "summary": _STRING,
            },
            "required": ["title", "speakerName", "category", "language", "tags", "summary"],
        },
        "transcript": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "timestamp": _STRING,
                    "speaker": _STRING,
                    "text": _STRING,
                    "tone": _STRING,
                    "intent": _STRING,
                },
                "required": ["timestamp", "speaker", "text", "tone", "intent"],
            },
        },
    },
    "required": ["metadata", "transcript"],
}


def build_prompt(hints: AnalysisHints) -> str:
    return PROMPT_TEMPLATE.format(
        title=hints.title,
        speaker_name=hints.speaker_name,
        category=hints.category,
    )


def parse_response(data: dict) -> AnalysisResult:
    """Extract and validate the JSON analysis from a generateContent response body."""
    try:
        text = data["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError) as e:
        raise InferenceError(f"Unexpected Gemini response shape: {e!r}") from e

    try:
        dto = AnalysisResponse.model_validate(json.loads(text))
    except json.JSONDecodeError as e:
        raise InferenceError(f"Gemini returned invalid JSON: {e}") from e
    except ValidationError as e:
        raise InferenceError(f"Gemini response does not match schema: {e}") from e

    return dto_to_result(dto)


class GeminiInferenceAdapter(InferencePort):
    def __init__(
        self,
        api_key: Optional[str],
        model: str = DEFAULT_MODEL,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        client: Optional[httpx.Client] = None,
    ):
        if not api_key or api_key == "undefined":
            raise ConfigurationError(
                "GEMINI_API_KEY is not set. Add it to your .env file. "
                "Get an API key from: https://aistudio.google.com/apikey"
            )
        self._api_key = api_key
        self._model = model
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._client = client

    def analyze(self, payload: SegmentPayload, hints: AnalysisHints) -> AnalysisResult:
        url = f"{self._base_url}/models/{self._model}:generateContent"
        body = {
            "contents": [{
                "parts": [
                    {"inlineData": {"data": payload.data, "mimeType": payload.mime_type}},
                    {"text": build_prompt(hints)},
                ],
            }],
            "generationConfig": {
                "responseMimeType": "application/json",
                "responseSchema": RESPONSE_SCHEMA,
            },
        }
        headers = {"x-goog-api-key": self._api_key}

        logger.info(f"Sending segment {payload.segment_index} to {self._model}: {hints.title}")
        try:
            if self._client is not None:
                resp = self._client.post(url, headers=headers, json=body, timeout=self._timeout)
            else:
                with httpx.Client(timeout=self._timeout) as client:
                    resp = client.post(url, headers=headers, json=body)
        except httpx.HTTPError as e:
            raise InferenceError(f"Gemini request failed: {e}") from e

        if resp.status_code != 200:
            logger.error(f"Gemini returned HTTP {resp.status_code}: {resp.text[:500]}")
            raise InferenceError(f"Gemini returned HTTP {resp.status_code}")

        try:
            data = resp.json()
        except ValueError as e:
            raise InferenceError(f"Gemini response body is not JSON: {e}") from e

        result = parse_response(data)
        logger.info(f"Segment {payload.segment_index}: {len(result.transcript)} transcript entries")
        return result

    def model_name(self) -> str:
        return self._model
