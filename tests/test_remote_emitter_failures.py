from __future__ import annotations

import threading
import time
from typing import Any, Dict, List

import httpx
import pytest

from graphbuilder.compiler import DirectEdge, SpecNode, WorkflowSpec, render_spec_text
from graphbuilder.core import Language
from graphbuilder.emitters import HttpResponse, HttpxRequestSender, RemoteEmitter
from graphbuilder.errors import InvalidSpec, RemoteGenerationFailure


pytestmark = pytest.mark.basic


def _spec() -> WorkflowSpec:
    return WorkflowSpec(
        name="CustomAgent",
        nodes=(SpecNode("A"),),
        edges=(DirectEdge("__start__", "A"), DirectEdge("A", "__end__")),
    )


class _FakeSender:
    def __init__(self, responses: Dict[str, Any]) -> None:
        self.responses = responses
        self.calls: List[Dict[str, Any]] = []
        self._lock = threading.Lock()

    def post(self, url: str, *, headers: Dict[str, str], json: Dict[str, Any], timeout: float) -> HttpResponse:
        with self._lock:
            self.calls.append({"url": url, "headers": dict(headers), "json": dict(json), "timeout": timeout})
        resp = self.responses[json["language"]]
        if isinstance(resp, Exception):
            raise resp
        return resp


def _ok(lang: str) -> HttpResponse:
    return HttpResponse(status_code=200, body={"stub": f"# stub {lang}", "implementation": f"# impl {lang}"})


def test_emit_posts_spec_text_language_and_format() -> None:
    sender = _FakeSender({"python": _ok("python")})
    emitter = RemoteEmitter(url="https://gen.example/generate", timeout_s=7, request_sender=sender)

    code = emitter.emit(_spec(), "py")

    assert code.language is Language.PYTHON
    assert (code.stub, code.implementation) == ("# stub python", "# impl python")
    call = sender.calls[0]
    assert call["url"] == "https://gen.example/generate"
    assert call["timeout"] == 7
    assert call["headers"]["Content-Type"] == "application/json"
    assert call["json"] == {"spec": render_spec_text(_spec(), "python"), "language": "python", "format": "yaml"}


def test_spec_text_is_sent_verbatim() -> None:
    text = render_spec_text(_spec(), "typescript") + "# trailing comment\n"
    sender = _FakeSender({"typescript": _ok("typescript")})

    RemoteEmitter(request_sender=sender).emit(text, "typescript")
    assert sender.calls[0]["json"]["spec"] == text


def test_invalid_spec_text_is_rejected_before_any_request() -> None:
    sender = _FakeSender({})
    with pytest.raises(InvalidSpec):
        RemoteEmitter(request_sender=sender).emit("name: [", "python")
    assert sender.calls == []


def test_non_2xx_status_is_a_hard_failure() -> None:
    sender = _FakeSender({"python": HttpResponse(status_code=502, body={"error": "bad gateway"})})
    with pytest.raises(RemoteGenerationFailure) as exc:
        RemoteEmitter(request_sender=sender).emit(_spec(), "python")
    assert exc.value.language == "python"
    assert exc.value.status_code == 502
    assert "502" in str(exc.value)


@pytest.mark.parametrize("body", [None, {"stub": "only stub"}, {"stub": 1, "implementation": ["x"]}, "text"])
def test_malformed_body_is_a_hard_failure(body: Any) -> None:
    sender = _FakeSender({"python": HttpResponse(status_code=200, body=body)})
    with pytest.raises(RemoteGenerationFailure) as exc:
        RemoteEmitter(request_sender=sender).emit(_spec(), "python")
    assert exc.value.status_code == 200


def test_transport_error_is_wrapped() -> None:
    sender = _FakeSender({"python": httpx.ConnectError("connection refused")})
    with pytest.raises(RemoteGenerationFailure) as exc:
        RemoteEmitter(request_sender=sender).emit(_spec(), "python")
    assert exc.value.status_code is None
    assert isinstance(exc.value.__cause__, httpx.ConnectError)


def test_failure_leaves_spec_resubmittable() -> None:
    text = render_spec_text(_spec(), "python")
    sender = _FakeSender({"python": HttpResponse(status_code=500, body=None)})
    emitter = RemoteEmitter(request_sender=sender)
    with pytest.raises(RemoteGenerationFailure):
        emitter.emit(text, "python")

    sender.responses["python"] = _ok("python")
    assert emitter.emit(text, "python").stub == "# stub python"
    assert [c["json"]["spec"] for c in sender.calls] == [text, text]


def test_emit_many_isolates_per_language_failures() -> None:
    sender = _FakeSender({"python": _ok("python"), "typescript": HttpResponse(status_code=503, body=None)})
    results = RemoteEmitter(request_sender=sender).emit_many(_spec(), ["python", "ts", "py"])

    assert list(results) == [Language.PYTHON, Language.TYPESCRIPT]
    assert results[Language.PYTHON].implementation == "# impl python"
    failure = results[Language.TYPESCRIPT]
    assert isinstance(failure, RemoteGenerationFailure)
    assert failure.status_code == 503
    assert len(sender.calls) == 2


def test_emit_many_with_no_languages() -> None:
    assert RemoteEmitter(request_sender=_FakeSender({})).emit_many(_spec(), []) == {}


def test_httpx_sender_uses_client_and_decodes_json() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/generate"
        assert request.headers["content-type"] == "application/json"
        return httpx.Response(200, json={"stub": "s", "implementation": "i"})

    sender = HttpxRequestSender(client=httpx.Client(transport=httpx.MockTransport(handler)))
    with RemoteEmitter(url="https://gen.example/generate", request_sender=sender) as emitter:
        code = emitter.emit(_spec(), "python")
    assert (code.stub, code.implementation) == ("s", "i")


def test_httpx_sender_tolerates_non_json_bodies() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, text="Internal Server Error")

    sender = HttpxRequestSender(client=httpx.Client(transport=httpx.MockTransport(handler)))
    resp = sender.post("https://gen.example/generate", headers={}, json={}, timeout=1.0)
    assert resp.status_code == 500
    assert resp.body is None


def test_emit_many_does_not_wait_for_in_flight_requests_when_interrupted() -> None:
    gate = threading.Event()
    finished = threading.Event()

    class _Sender:
        def post(self, url, *, headers, json, timeout):
            if json["language"] == "python":
                raise KeyboardInterrupt
            gate.wait(5.0)
            finished.set()
            return _ok("typescript")

    started = time.monotonic()
    try:
        with pytest.raises(KeyboardInterrupt):
            RemoteEmitter(request_sender=_Sender()).emit_many(_spec(), ["python", "typescript"])
        assert time.monotonic() - started < 4.0
        assert not finished.is_set()
    finally:
        gate.set()
