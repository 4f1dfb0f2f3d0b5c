"""Best-effort access to a remote translation service."""

from __future__ import annotations

import json
import logging
import random
import time
from dataclasses import dataclass
from typing import List, Optional, Sequence

import requests
from google import genai
from google.genai import types

GOOGLE_TRANSLATE_URL = "https://translate.googleapis.com/translate_a/single"
DEFAULT_GEMINI_MODEL = "gemini-2.5-flash"

BACKEND_GOOGLE = "google"
BACKEND_GEMINI = "gemini"
BACKENDS = (BACKEND_GOOGLE, BACKEND_GEMINI)

REQUEST_TIMEOUT_SECONDS = 10.0
REQUEST_DELAY_SECONDS = 0.1
BACKOFF_SECONDS = 1.0
BACKOFF_MAX_SECONDS = 30.0

PROBE_TEXT = "Hello"
PROBE_SOURCE_LANG = "en"
PROBE_TARGET_LANG = "pt"
PROBE_TOKENS = ("olá", "oi")


class TranslationError(RuntimeError):
    """Raised by a backend when the service answered with something unusable."""


@dataclass(frozen=True)
class TranslationResult:
    original_text: str
    translated_text: str
    source_lang: str
    target_lang: str


@dataclass(frozen=True)
class GatewayConfig:
    """Settings for one gateway; built once and never changed afterwards."""

    backend: str = BACKEND_GOOGLE
    api_key: Optional[str] = None
    timeout: float = REQUEST_TIMEOUT_SECONDS
    request_delay: float = REQUEST_DELAY_SECONDS
    max_retries: int = 0
    model: str = DEFAULT_GEMINI_MODEL


@dataclass(frozen=True)
class PromptConfig:
    """Holds the prompt template used by the Gemini backend."""

    template: str

    def build(self, batch: Sequence[str], source_lang: str, target_lang: str) -> str:
        return self.template.format(
            source_lang=source_lang,
            target_lang=target_lang,
            input_list=json.dumps(list(batch), ensure_ascii=False),
        )


DEFAULT_PROMPT_CONFIG = PromptConfig(
    template=(
        "You are a professional software localization specialist. "
        "Translate the provided list of user interface strings from language code "
        "{source_lang} to language code {target_lang}. "
        "Keep placeholders such as {{0}}, %s, %d and markup unchanged and in the same position. "
        "Do NOT merge, split, rephrase, or reorder strings. "
        "Return ONLY a valid JSON array of translated strings, "
        "with the exact same number of elements and order as the input. "
        "Input list: {input_list}"
    ),
)


def extract_translated_text(payload: object) -> str:
    """Join the translated segments of a ``translate_a/single`` response.

    The service answers with nested arrays whose first element is a list of
    ``[translated, original, ...]`` segments.
    """
    if not isinstance(payload, list) or not payload or not isinstance(payload[0], list):
        raise TranslationError(f"Unexpected response shape: {str(payload)[:120]}")
    parts: List[str] = []
    for segment in payload[0]:
        if isinstance(segment, list) and segment and isinstance(segment[0], str):
            parts.append(segment[0])
    return "".join(parts).strip()


class GoogleTranslateBackend:
    """Google Translate public endpoint (``client=gtx``)."""

    def __init__(self, timeout: float = REQUEST_TIMEOUT_SECONDS, session: Optional[requests.Session] = None):
        self.timeout = timeout
        self.session = session or requests.Session()

    def translate(self, text: str, source_lang: str, target_lang: str) -> str:
        params = {
            "client": "gtx",
            "sl": source_lang,
            "tl": target_lang,
            "dt": "t",
            "q": text,
        }
        resp = self.session.get(GOOGLE_TRANSLATE_URL, params=params, timeout=self.timeout)
        resp.raise_for_status()
        try:
            payload = resp.json()
        except ValueError as exc:
            raise TranslationError(f"Invalid JSON: {exc}") from exc
        return extract_translated_text(payload)


def setup_gemini(api_key: str, timeout: float = REQUEST_TIMEOUT_SECONDS) -> genai.Client:
    """Create a Google GenAI client (google-genai SDK); the SDK takes milliseconds."""
    return genai.Client(
        api_key=api_key,
        http_options=types.HttpOptions(timeout=int(timeout * 1000)),
    )


def clean_json_response(text: str) -> str:
    text = text.strip()
    if text.startswith("```json"):
        text = text[7:]
    if text.startswith("```"):
        text = text[3:]
    if text.endswith("```"):
        text = text[:-3]
    return text.strip()


class GeminiBackend:
    """Gemini model asked to return a one-element JSON array."""

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_GEMINI_MODEL,
        timeout: float = REQUEST_TIMEOUT_SECONDS,
        prompt_config: PromptConfig = DEFAULT_PROMPT_CONFIG,
        client: Optional[genai.Client] = None,
    ):
        self.model = model
        self.prompt_config = prompt_config
        self.client = client or setup_gemini(api_key, timeout)

    def translate(self, text: str, source_lang: str, target_lang: str) -> str:
        prompt = self.prompt_config.build([text], source_lang, target_lang)
        response = self.client.models.generate_content(
            model=self.model,
            contents=prompt,
            config=types.GenerateContentConfig(
                response_mime_type="application/json",
                response_schema=list[str],
            ),
        )

        response_text = getattr(response, "text", None)
        if not response_text:
            raise TranslationError("Empty response or no usable text returned.")

        cleaned_text = clean_json_response(response_text)
        try:
            translations = json.loads(cleaned_text)
        except json.JSONDecodeError as exc:
            raise TranslationError(f"Invalid JSON: {exc}. Received text: {cleaned_text[:120]}") from exc

        if not isinstance(translations, list) or len(translations) != 1 or not isinstance(translations[0], str):
            raise TranslationError(f"Expected a one-element JSON array, received: {cleaned_text[:120]}")
        return translations[0].strip()


def create_backend(config: GatewayConfig):
    if config.backend == BACKEND_GOOGLE:
        return GoogleTranslateBackend(timeout=config.timeout)
    if config.backend == BACKEND_GEMINI:
        if not config.api_key:
            raise ValueError("The gemini backend requires an API key.")
        return GeminiBackend(api_key=config.api_key, model=config.model, timeout=config.timeout)
    raise ValueError(f"Unknown translation backend: {config.backend}")


class TranslationGateway:
    """Translates text through a backend and never lets a failure escape.

    Any error is logged as a warning and the source text comes back as the
    "translation", so the worst outcome is an untranslated string.
    """

    def __init__(self, config: Optional[GatewayConfig] = None, backend=None):
        self.config = config or GatewayConfig()
        self.backend = backend if backend is not None else create_backend(self.config)

    def _call_with_retry(self, text: str, source_lang: str, target_lang: str) -> str:
        attempt = 0
        while True:
            try:
                return self.backend.translate(text, source_lang, target_lang)
            except Exception as exc:
                attempt += 1
                if attempt > self.config.max_retries:
                    raise
                logging.warning(
                    "Translation error (attempt %s/%s): %s",
                    attempt,
                    self.config.max_retries,
                    exc,
                )
                backoff = min(BACKOFF_SECONDS * (2 ** (attempt - 1)), BACKOFF_MAX_SECONDS)
                backoff += random.uniform(0, BACKOFF_SECONDS)
                time.sleep(backoff)

    def translate_one(self, text: str, source_lang: str, target_lang: str) -> TranslationResult:
        clean_text = text.strip()
        if not clean_text:
            return TranslationResult(text, text, source_lang, target_lang)

        try:
            translated = self._call_with_retry(clean_text, source_lang, target_lang)
        except Exception as exc:
            logging.warning("Translation failed for %r: %s", text[:50], exc)
            return TranslationResult(text, text, source_lang, target_lang)

        return TranslationResult(text, translated or clean_text, source_lang, target_lang)

    def translate_batch(
        self,
        texts: Sequence[str],
        source_lang: str,
        target_lang: str,
    ) -> List[TranslationResult]:
        results: List[TranslationResult] = []
        for idx, text in enumerate(texts):
            if idx and self.config.request_delay > 0:
                time.sleep(self.config.request_delay)
            results.append(self.translate_one(text, source_lang, target_lang))
        return results

    def test_connection(self) -> bool:
        result = self.translate_one(PROBE_TEXT, PROBE_SOURCE_LANG, PROBE_TARGET_LANG)
        translated = result.translated_text.lower()
        return any(token in translated for token in PROBE_TOKENS)
