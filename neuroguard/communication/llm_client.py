"""
Text-generation client for commentary

The commentary service talks to an external LLM endpoint through the
CommentaryClient protocol. HttpCommentaryClient posts JSON to a
vLLM/Triton-style generate endpoint configured from environment variables.
"""

import json
import logging
import os
import urllib.error
import urllib.request
from dataclasses import dataclass
from typing import Optional, Protocol

from ..core.config import (
    COMMENTARY_URL_ENV, COMMENTARY_MODEL_ENV, COMMENTARY_TOKEN_ENV, COMMENTARY_TIMEOUT_SEC
)


class CommentaryError(RuntimeError):
    """Raised when the text-generation service fails or is not configured"""


@dataclass
class CommentaryRequest:
    prompt: str
    max_tokens: int = 512
    temperature: float = 0.7
    system_prompt: Optional[str] = None
    json_response: bool = False


@dataclass
class CommentaryResponse:
    text: str
    model: str


class CommentaryClient(Protocol):
    def generate(self, req: CommentaryRequest) -> CommentaryResponse:
        ...


@dataclass
class HttpClientConfig:
    base_url: Optional[str] = None
    model: Optional[str] = None
    api_token: Optional[str] = None
    timeout: float = COMMENTARY_TIMEOUT_SEC


class HttpCommentaryClient:
    """
    Minimal HTTP client for a text-generation endpoint

    Expects a POST JSON API taking model, prompt, max_tokens and temperature
    and answering with ``text`` (or ``completion``).
    """

    def __init__(self, config: Optional[HttpClientConfig] = None):
        self.config = config or HttpClientConfig()
        self.base_url = self.config.base_url or os.getenv(COMMENTARY_URL_ENV)
        self.model = self.config.model or os.getenv(COMMENTARY_MODEL_ENV) or "default"
        self.api_token = self.config.api_token or os.getenv(COMMENTARY_TOKEN_ENV)
        if not self.base_url:
            raise CommentaryError(f"Commentary endpoint is not configured (set {COMMENTARY_URL_ENV}).")

    def generate(self, req: CommentaryRequest) -> CommentaryResponse:
        prompt = req.prompt if not req.system_prompt else f"{req.system_prompt.strip()}\n\n{req.prompt.strip()}"
        payload = {
            "model": self.model,
            "prompt": prompt,
            "max_tokens": req.max_tokens,
            "temperature": req.temperature,
        }
        if req.json_response:
            payload["response_format"] = {"type": "json_object"}

        headers = {"Content-Type": "application/json"}
        if self.api_token:
            headers["Authorization"] = f"Bearer {self.api_token}"

        request = urllib.request.Request(
            self.base_url, data=json.dumps(payload).encode("utf-8"), headers=headers, method="POST"
        )
        try:
            with urllib.request.urlopen(request, timeout=self.config.timeout) as resp:
                parsed = json.loads(resp.read().decode("utf-8"))
        except urllib.error.HTTPError as exc:
            detail = exc.read().decode("utf-8") if hasattr(exc, "read") else str(exc)
            raise CommentaryError(f"Commentary HTTP error: {exc.code} {detail}") from exc
        except (urllib.error.URLError, OSError, ValueError) as exc:
            raise CommentaryError(f"Commentary request failed: {exc}") from exc

        text = ""
        if isinstance(parsed, dict):
            text = parsed.get("text") or parsed.get("completion") or ""
        logging.debug(f"Commentary response from {self.model}: {len(str(text))} chars")
        return CommentaryResponse(text=str(text), model=self.model)


def client_from_env() -> Optional[HttpCommentaryClient]:
    """HTTP client if the endpoint variable is set, otherwise None"""
    if not os.getenv(COMMENTARY_URL_ENV):
        return None
    return HttpCommentaryClient()
