# llm.py  — optional external text generation (Gemini, Hugging Face inference)
import logging
import time
from typing import List, Optional, Sequence

import google.generativeai as genai
import requests

from edututor import config

logger = logging.getLogger(__name__)

# Known-good text chat models (tried in this order after the pinned GEMINI_MODEL)
GEMINI_CANDIDATE_MODELS = [
    "gemini-1.5-flash",
    "gemini-1.5-flash-002",
    "gemini-1.5-flash-8b",
    "gemini-1.5-pro",
    "gemini-1.0-pro",
    "gemini-pro",
]

HF_BASE_URL = "https://api-inference.huggingface.co/models"
HF_CANDIDATE_MODELS = [
    "microsoft/DialoGPT-large",
    "microsoft/DialoGPT-medium",
    "facebook/blenderbot-400M-distill",
]
HF_PARAMETERS = {
    "max_new_tokens": 200,
    "temperature": 0.7,
    "do_sample": True,
    "return_full_text": False,
}


class LLMError(Exception):
    pass


class LLMTimeout(LLMError):
    pass


def _remaining(deadline: float, cap: float) -> float:
    """Seconds left before the deadline, at most cap; LLMTimeout once it has passed."""
    left = deadline - time.monotonic()
    if left <= 0:
        raise LLMTimeout("Timeout")
    return min(cap, left)


def _ordered(pinned: Optional[str], candidates: Sequence[str]) -> List[str]:
    names = [pinned] if pinned else []
    return names + [m for m in candidates if m != pinned]


class GeminiProvider:
    name = "gemini"

    def __init__(self, api_key: str, model: Optional[str] = None, timeout: float = config.LLM_TIMEOUT_SECONDS):
        genai.configure(api_key=api_key)
        self.models = _ordered(model, GEMINI_CANDIDATE_MODELS)
        self.timeout = timeout

    def _try_model_once(self, model_name: str, prompt: str, timeout: float) -> str:
        model = genai.GenerativeModel(model_name)
        resp = model.generate_content(prompt, request_options={"timeout": timeout})
        # Blocked responses raise on .text
        try:
            text = resp.text
        except ValueError as e:
            raise LLMError(f"Model {model_name} returned no text: {e}")
        if not text or not text.strip():
            raise LLMError(f"Model {model_name} returned empty response.")
        return text.strip()

    def generate(self, prompt: str, deadline: Optional[float] = None) -> str:
        deadline = deadline if deadline is not None else time.monotonic() + self.timeout
        errors = []
        for name in self.models:
            timeout = _remaining(deadline, self.timeout)
            try:
                logger.info("[LLM] Trying Gemini model: %s", name)
                return self._try_model_once(name, prompt, timeout)
            except Exception as e:
                errors.append(f"{name}: {e}")
                continue
        raise LLMError("All Gemini models failed:\n" + "\n".join(errors))


class HuggingFaceProvider:
    name = "huggingface"

    def __init__(self, api_key: str, models: Optional[Sequence[str]] = None,
                 timeout: float = config.LLM_TIMEOUT_SECONDS, base_url: str = HF_BASE_URL):
        self.api_key = api_key
        self.models = list(models or HF_CANDIDATE_MODELS)
        self.timeout = timeout
        self.base_url = base_url

    def _try_model_once(self, model_name: str, prompt: str, timeout: float) -> str:
        resp = requests.post(
            f"{self.base_url}/{model_name}",
            headers={
                "Authorization": f"Bearer {self.api_key}",
                "Content-Type": "application/json",
            },
            json={"inputs": prompt, "parameters": HF_PARAMETERS},
            timeout=timeout,
        )
        if resp.status_code != 200:
            raise LLMError(f"Model {model_name} failed: HTTP {resp.status_code}")
        try:
            data = resp.json()
            text = data[0]["generated_text"]
        except (ValueError, LookupError, TypeError) as e:
            raise LLMError(f"Model {model_name} returned an unexpected payload: {e}")
        if not isinstance(text, str) or not text.strip():
            raise LLMError(f"Model {model_name} returned empty or non-text response.")
        return text

    def generate(self, prompt: str, deadline: Optional[float] = None) -> str:
        deadline = deadline if deadline is not None else time.monotonic() + self.timeout
        errors = []
        for name in self.models:
            timeout = _remaining(deadline, self.timeout)
            try:
                logger.info("[LLM] Trying Hugging Face model: %s", name)
                return self._try_model_once(name, prompt, timeout)
            except (requests.RequestException, LLMError) as e:
                errors.append(f"{name}: {e}")
                continue
        raise LLMError("All Hugging Face models failed:\n" + "\n".join(errors))


class ExternalGenerator:
    """
    Tries each provider in order; the first non-empty reply wins.
    One deadline covers the whole chain, every model attempt included.
    """

    def __init__(self, providers: Sequence, timeout: float = config.LLM_TIMEOUT_SECONDS):
        self.providers = list(providers)
        self.timeout = timeout

    def __call__(self, prompt: str) -> str:
        return self.generate(prompt)

    def generate(self, prompt: str) -> str:
        deadline = time.monotonic() + self.timeout
        errors = []
        for provider in self.providers:
            try:
                _remaining(deadline, self.timeout)
                return provider.generate(prompt, deadline=deadline)
            except LLMTimeout:
                logger.warning("[LLM] Gave up after %ss", self.timeout)
                raise
            except Exception as e:
                logger.warning("[LLM] Provider %s failed: %s", provider.name, e)
                errors.append(f"{provider.name}: {e}")
        if not errors:
            raise LLMError("No text generation provider is configured.")
        raise LLMError("All providers failed:\n" + "\n".join(errors))

    def status(self) -> dict:
        if self.providers:
            names = ", ".join(p.name for p in self.providers)
            return {
                "available": True,
                "message": f"External AI tutoring is configured ({names}).",
            }
        return {
            "available": False,
            "message": "Using smart educational responses. Add GOOGLE_API_KEY or HUGGING_FACE_API_KEY for enhanced AI tutoring.",
        }

    def ping(self) -> dict:
        """
        Returns {"ok": True, "content": "..."} on success,
                or {"ok": False, "error": "..."} on failure.
        """
        try:
            text = self.generate("Reply with OK")
            return {"ok": True, "content": text.strip()[:200]}
        except LLMError as e:
            return {"ok": False, "error": str(e)}


def build_generator(
    google_api_key: str = config.GOOGLE_API_KEY,
    gemini_model: str = config.GEMINI_MODEL,
    hugging_face_api_key: str = config.HUGGING_FACE_API_KEY,
    timeout: float = config.LLM_TIMEOUT_SECONDS,
) -> Optional[ExternalGenerator]:
    """Build the provider chain from configuration; None when no key is set."""
    providers = []
    if google_api_key:
        providers.append(GeminiProvider(google_api_key, model=gemini_model or None, timeout=timeout))
    if hugging_face_api_key:
        providers.append(HuggingFaceProvider(hugging_face_api_key, timeout=timeout))
    if not providers:
        logger.info("[LLM] No API keys configured, answering from canned responses")
        return None
    return ExternalGenerator(providers, timeout=timeout)
