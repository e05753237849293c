"""Remote emitter backed by the langgraph-gen HTTP service.

Request:  POST {spec: <canonical spec text>, language: "python"|"typescript", format: "yaml"}
Response: {stub: <str>, implementation: <str>}

Any transport error, non-2xx status or malformed body is a hard failure for that
language (`RemoteGenerationFailure`); no partial result is returned. The spec
text itself is never modified and can be resubmitted after a failure.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Optional, Protocol, Union

import httpx
from pydantic import BaseModel, ValidationError

from ..compiler.serialize import parse_spec_text, render_spec_text
from ..compiler.spec import WorkflowSpec
from ..core.config import DEFAULT_GENERATE_URL, DEFAULT_TIMEOUT_S
from ..core.languages import Language
from ..errors import RemoteGenerationFailure
from ..logging import get_logger
from .base import GeneratedCode, SpecInput

logger = get_logger(__name__)

SPEC_FORMAT = "yaml"


@dataclass(frozen=True)
class HttpResponse:
    status_code: int
    body: Any
    headers: Dict[str, str] = field(default_factory=dict)


class RequestSender(Protocol):
    def post(
        self,
        url: str,
        *,
        headers: Dict[str, str],
        json: Dict[str, Any],
        timeout: float,
    ) -> HttpResponse: ...


class GenerateResponse(BaseModel):
    stub: str
    implementation: str


class HttpxRequestSender:
    """Default request sender based on httpx (sync, thread-safe client)."""

    def __init__(self, client: Optional[httpx.Client] = None):
        self._client = client or httpx.Client()

    def post(
        self,
        url: str,
        *,
        headers: Dict[str, str],
        json: Dict[str, Any],
        timeout: float,
    ) -> HttpResponse:
        resp = self._client.post(url, headers=headers, json=json, timeout=timeout)
        try:
            body = resp.json()
        except ValueError:
            body = None
        return HttpResponse(status_code=resp.status_code, body=body, headers=dict(resp.headers))

    def close(self) -> None:
        self._client.close()


class RemoteEmitter:
    """Emitter delegating stub/implementation generation to the remote service."""

    def __init__(
        self,
        *,
        url: str = DEFAULT_GENERATE_URL,
        timeout_s: float = DEFAULT_TIMEOUT_S,
        headers: Optional[Dict[str, str]] = None,
        request_sender: Optional[RequestSender] = None,
    ):
        self._url = url
        self._timeout_s = timeout_s
        self._headers = {"Content-Type": "application/json", **dict(headers or {})}
        self._sender = request_sender or HttpxRequestSender()

    def __enter__(self) -> "RemoteEmitter":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    def close(self) -> None:
        close = getattr(self._sender, "close", None)
        if callable(close):
            close()

    def _spec_text(self, spec: SpecInput, language: Language) -> str:
        if isinstance(spec, WorkflowSpec):
            return render_spec_text(spec, language)
        # Validate before spending a request; the text is sent verbatim.
        parse_spec_text(spec)
        return spec

    def emit(self, spec: SpecInput, language: Union[Language, str]) -> GeneratedCode:
        lang = Language.parse(language)
        payload = {"spec": self._spec_text(spec, lang), "language": lang.value, "format": SPEC_FORMAT}

        logger.debug("Requesting %s generation from %s", lang.value, self._url)
        try:
            resp = self._sender.post(self._url, headers=dict(self._headers), json=payload, timeout=self._timeout_s)
        except (httpx.HTTPError, OSError) as e:
            logger.warning("Remote generation request failed for %s: %s", lang.value, e)
            raise RemoteGenerationFailure(lang.value, f"request failed: {e}") from e

        if not 200 <= int(resp.status_code) < 300:
            logger.warning("Remote generation for %s returned HTTP %s", lang.value, resp.status_code)
            raise RemoteGenerationFailure(
                lang.value, f"API responded with status {resp.status_code}", status_code=int(resp.status_code)
            )

        try:
            parsed = GenerateResponse.model_validate(resp.body)
        except ValidationError as e:
            logger.warning("Remote generation for %s returned a malformed body", lang.value)
            raise RemoteGenerationFailure(
                lang.value, "malformed response body", status_code=int(resp.status_code)
            ) from e

        return GeneratedCode(language=lang, stub=parsed.stub, implementation=parsed.implementation)

    def emit_many(
        self,
        spec: SpecInput,
        languages: Iterable[Union[Language, str]],
    ) -> Dict[Language, Union[GeneratedCode, RemoteGenerationFailure]]:
        """Generate for several languages concurrently.

        Each language is an independent request; a failure is returned as the
        value for that language and never hides another language's result.
        If the caller is interrupted while waiting, the call returns at once
        without waiting for requests still in flight.
        """
        langs = list(dict.fromkeys(Language.parse(x) for x in languages))
        if not langs:
            return {}

        def _one(lang: Language) -> Union[GeneratedCode, RemoteGenerationFailure]:
            try:
                return self.emit(spec, lang)
            except RemoteGenerationFailure as e:
                return e

        pool = ThreadPoolExecutor(max_workers=len(langs), thread_name_prefix="graphbuilder-remote")
        try:
            futures = {lang: pool.submit(_one, lang) for lang in langs}
            results = {lang: fut.result() for lang, fut in futures.items()}
        except BaseException:
            # Interrupted: drop queued requests and leave in-flight ones behind.
            pool.shutdown(wait=False, cancel_futures=True)
            raise
        pool.shutdown(wait=True)
        return results
