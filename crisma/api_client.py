# crisma/api_client.py
"""
HTTP client for the Crisma backend.

Every call goes through one ``requests.Session`` so the backend's session
cookie (set by ``/api/auth/login``) rides along automatically. Any failure,
whether transport, non-2xx status or an unusable body, comes out as a single
``ApiError`` carrying a message that is safe to show to the operator.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Optional, Union

import requests
from pydantic import BaseModel, TypeAdapter, ValidationError

logger = logging.getLogger(__name__)


EMPTY_RESPONSE_MESSAGE = "API returned a successful but empty response."
INVALID_FORMAT_MESSAGE = "Invalid data format received from server."


class ApiError(Exception):
    """Normalised failure of a backend call.

    ``status_code`` is ``None`` for transport failures (no response at all).
    """

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    def __str__(self) -> str:
        return self.message


def error_message_from(response: requests.Response) -> str:
    """Pick the most useful message out of a failed response.

    Order: JSON ``{"error": ...}`` field, then the raw body text, then a
    generic status line.
    """
    text = response.text or ""
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    if text.strip():
        return text
    return f"Request failed with status {response.status_code}"


class ApiClient:
    def __init__(
        self,
        base_url: str,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    # ---- transport -----------------------------------------------------------

    def _url(self, path: str) -> str:
        if path.startswith("http://") or path.startswith("https://"):
            return path
        return f"{self.base_url}/{path.lstrip('/')}"

    def _send(self, method: str, path: str, **kwargs: Any) -> requests.Response:
        url = self._url(path)
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as exc:
            logger.warning("%s %s failed: %s", method, path, exc)
            raise ApiError(f"Network error: {exc}") from exc

        if not response.ok:
            message = error_message_from(response)
            logger.warning("%s %s -> %s: %s", method, path, response.status_code, message)
            raise ApiError(message, status_code=response.status_code)

        logger.debug("%s %s -> %s", method, path, response.status_code)
        return response

    @staticmethod
    def _json(response: requests.Response, required: bool) -> Any:
        text = response.text
        if not text or not text.strip():
            if required:
                raise ApiError(EMPTY_RESPONSE_MESSAGE, status_code=response.status_code)
            return None
        try:
            return json.loads(text)
        except ValueError as exc:
            raise ApiError(INVALID_FORMAT_MESSAGE, status_code=response.status_code) from exc

    @staticmethod
    def _decode(payload: Any, model: Any) -> Any:
        if model is None:
            return payload
        try:
            return TypeAdapter(model).validate_python(payload)
        except ValidationError as exc:
            logger.warning("Response failed validation against %s: %s", model, exc)
            raise ApiError(INVALID_FORMAT_MESSAGE) from exc

    # ---- verbs ---------------------------------------------------------------

    def get(self, path: str, model: Any = None) -> Any:
        response = self._send("GET", path)
        return self._decode(self._json(response, required=True), model)

    def post(self, path: str, body: Union[BaseModel, dict, None] = None, model: Any = None) -> Any:
        response = self._send("POST", path, json=_jsonable(body))
        return self._decode(self._json(response, required=True), model)

    def put(self, path: str, body: Union[BaseModel, dict, None] = None, model: Any = None) -> Any:
        response = self._send("PUT", path, json=_jsonable(body))
        return self._decode(self._json(response, required=True), model)

    def post_no_content(self, path: str, body: Union[BaseModel, dict, None] = None) -> None:
        """POST where the backend answers with a bare status (e.g. 201, no body)."""
        self._send("POST", path, json=_jsonable(body))

    def post_text(self, path: str, text: str, model: Any = None) -> Any:
        """POST ``text`` as the literal request body and decode the JSON reply."""
        response = self._send(
            "POST",
            path,
            data=text.encode("utf-8"),
            headers={"Content-Type": "text/plain; charset=utf-8"},
        )
        return self._decode(self._json(response, required=True), model)

    def delete(self, path: str) -> None:
        self._send("DELETE", path)


def _jsonable(body: Union[BaseModel, dict, None]) -> Any:
    if isinstance(body, BaseModel):
        return body.model_dump(mode="json")
    return body
