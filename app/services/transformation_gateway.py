"""Gateway to the remote image transformation provider (Replicate)."""

from __future__ import annotations

import base64
from typing import Any, Dict, Optional, Protocol

import httpx

from app.core.config import Settings, settings as default_settings
from app.core.logging import get_logger

logger = get_logger(__name__)


class GatewayError(RuntimeError):
    """Any failure returned by, or while talking to, the transformation provider."""


class TransformationGateway(Protocol):
    """Turns an image plus a text prompt into a locator for the generated result."""

    def generate(self, image_bytes: bytes, prompt: str) -> str:
        ...


class ReplicateGateway:
    """Submits prediction requests to the Replicate HTTP API."""

    def __init__(self, client: httpx.Client | None = None, config: Settings | None = None) -> None:
        self._config = config or default_settings
        self._client = client or httpx.Client(timeout=self._config.gateway_timeout_seconds)
        self._max_attempts = max(1, self._config.gateway_max_attempts)

    def generate(self, image_bytes: bytes, prompt: str) -> str:
        """Request a transformed image and return the prediction stream URL."""

        api_key = self._require_api_key()
        payload = self._build_payload(image_bytes, prompt)

        last_error: Optional[GatewayError] = None
        for attempt in range(1, self._max_attempts + 1):
            try:
                return self._create_prediction(api_key, payload)
            except GatewayError as exc:
                last_error = exc
                if attempt < self._max_attempts:
                    logger.warning(
                        "replicate_attempt_failed",
                        attempt=attempt,
                        max_attempts=self._max_attempts,
                        error=str(exc),
                    )

        assert last_error is not None
        raise last_error

    def close(self) -> None:
        self._client.close()

    def _create_prediction(self, api_key: str, payload: Dict[str, Any]) -> str:
        headers = {
            "Authorization": f"Token {api_key}",
            "Content-Type": "application/json",
        }
        try:
            response = self._client.post(self._config.replicate_api_url, json=payload, headers=headers)
        except httpx.TimeoutException as exc:
            raise GatewayError(f"Replicate request timed out: {exc}") from exc
        except httpx.HTTPError as exc:
            raise GatewayError(f"Replicate request failed: {exc}") from exc

        if response.status_code != httpx.codes.CREATED:
            raise GatewayError(f"Replicate returned HTTP {response.status_code}")

        return self._extract_stream_url(response)

    @staticmethod
    def _extract_stream_url(response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError as exc:
            raise GatewayError("Replicate response is not valid JSON") from exc

        urls = body.get("urls") if isinstance(body, dict) else None
        stream_url = urls.get("stream") if isinstance(urls, dict) else None
        if not isinstance(stream_url, str) or not stream_url:
            raise GatewayError("Replicate response is missing urls.stream")
        return stream_url

    def _build_payload(self, image_bytes: bytes, prompt: str) -> Dict[str, Any]:
        return {
            "version": self._config.replicate_model_version,
            "input": {
                "prompt": prompt,
                "image": base64.b64encode(image_bytes).decode("ascii"),
                "num_outputs": self._config.num_outputs,
                "image_dimensions": self._config.image_dimensions,
                "num_inference_steps": self._config.num_inference_steps,
            },
        }

    def _require_api_key(self) -> str:
        if not self._config.replicate_api_key:
            raise GatewayError("Replicate API key is not configured in settings.")
        return self._config.replicate_api_key
