"""
Submission Client Tests
Tests for mintflow/submissions.py and core/http/client.py
"""
import json
from datetime import datetime, timedelta, timezone

import pytest
import requests

from core.config.runtime import ClientConfig
from core.http.client import HttpClient, HttpError, HttpResponse
from mintflow.errors import SubmissionError
from mintflow.submissions import (
    DEFAULT_SUBMIT_ERROR,
    SubmissionClient,
    submission_error_message,
)


LOWER = "0xabcdef0123456789abcdef0123456789abcdef01"


def _json_response(status: int, body) -> HttpResponse:
    return HttpResponse(
        status_code=status,
        content=json.dumps(body).encode(),
        headers={"content-type": "application/json; charset=utf-8"},
    )


def _text_response(status: int, text: str, content_type: str = "text/plain") -> HttpResponse:
    return HttpResponse(
        status_code=status,
        content=text.encode(),
        headers={"content-type": content_type},
    )


class RecordingHttp:
    """HttpClient double returning canned responses."""

    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def _reply(self):
        if self.error is not None:
            raise self.error
        return self.response

    def post(self, url, *, json=None, **kwargs):
        self.calls.append(("POST", url, json))
        return self._reply()

    def get(self, url, **kwargs):
        self.calls.append(("GET", url, None))
        return self._reply()

    def close(self):
        pass


class TestEndpoint:
    """URL construction."""

    def test_relative_when_no_base(self):
        client = SubmissionClient(RecordingHttp(), ClientConfig(api_base_url=""))
        assert client.endpoint == "/api/wallet-submissions"

    def test_trailing_slash_trimmed(self):
        client = SubmissionClient(RecordingHttp(), ClientConfig(api_base_url="https://api.example.com/"))
        assert client.endpoint == "https://api.example.com/api/wallet-submissions"


class TestSubmit:
    """SubmissionClient.submit()."""

    def test_payload(self):
        http = RecordingHttp(_json_response(200, {
            "ok": True, "address": LOWER, "submittedAt": "2025-10-22T12:00:00+00:00",
        }))
        client = SubmissionClient(http, ClientConfig(api_base_url="http://localhost:3001"))

        record = client.submit(
            "0xABCDEF0123456789ABCDEF0123456789ABCDEF01",
            submitted_at=datetime(2025, 10, 22, 12, 0, tzinfo=timezone.utc),
        )

        method, url, payload = http.calls[0]
        assert method == "POST"
        assert url == "http://localhost:3001/api/wallet-submissions"
        assert payload == {
            "address": "0xABCDEF0123456789ABCDEF0123456789ABCDEF01",
            "source": "landing-join-footer",
            "submittedAt": "2025-10-22T12:00:00Z",
        }
        assert record.address == LOWER
        assert record.submitted_at == datetime(2025, 10, 22, 12, 0, tzinfo=timezone.utc)

    def test_json_error_message(self):
        http = RecordingHttp(_json_response(400, {"ok": False, "error": "A valid wallet address is required"}))
        with pytest.raises(SubmissionError) as exc_info:
            SubmissionClient(http).submit("bad")
        assert exc_info.value.message == "A valid wallet address is required"
        assert exc_info.value.status_code == 400
        assert not exc_info.value.retryable

    def test_transport_error(self):
        http = RecordingHttp(error=HttpError("connection refused"))
        with pytest.raises(SubmissionError) as exc_info:
            SubmissionClient(http).submit(LOWER)
        assert exc_info.value.message == DEFAULT_SUBMIT_ERROR
        assert exc_info.value.retryable


class TestErrorMessage:
    """submission_error_message()."""

    def test_plain_text(self):
        assert submission_error_message(_text_response(502, "Bad gateway")) == "Bad gateway"

    def test_html_is_hidden(self):
        response = _text_response(500, "<html><body>Error</body></html>", "text/html")
        assert submission_error_message(response) == DEFAULT_SUBMIT_ERROR

    def test_json_without_error(self):
        assert submission_error_message(_json_response(500, {"ok": False})) == DEFAULT_SUBMIT_ERROR

    def test_broken_json(self):
        response = HttpResponse(
            status_code=500,
            content=b"{oops",
            headers={"Content-Type": "application/json"},
        )
        assert submission_error_message(response) == DEFAULT_SUBMIT_ERROR

    def test_empty_body(self):
        assert submission_error_message(_text_response(500, "   ")) == DEFAULT_SUBMIT_ERROR


class TestList:
    """SubmissionClient.list()."""

    def test_parses_records(self):
        http = RecordingHttp(_json_response(200, {"submissions": [
            {"address": LOWER, "submittedAt": "2025-10-22T12:00:00+00:00"},
        ]}))
        records = SubmissionClient(http).list()

        assert http.calls[0][:2] == ("GET", "/api/wallet-submissions")
        assert [r.address for r in records] == [LOWER]

    def test_server_error(self):
        http = RecordingHttp(_json_response(500, {"ok": False, "error": "Unable to load wallet submissions"}))
        with pytest.raises(SubmissionError, match="Unable to load"):
            SubmissionClient(http).list()


class FakeSession:
    """requests.Session double."""

    def __init__(self, error=None):
        self.error = error
        self.kwargs = None
        self.closed = False
        self.headers = {}

    def request(self, **kwargs):
        self.kwargs = kwargs
        if self.error is not None:
            raise self.error
        response = requests.Response()
        response.status_code = 404
        response._content = b"missing"
        response.url = kwargs["url"]
        response.headers["Content-Type"] = "text/plain"
        response.elapsed = timedelta(milliseconds=5)
        return response

    def close(self):
        self.closed = True


class TestHttpClient:
    """core.http.client.HttpClient."""

    def test_non_2xx_returned(self):
        session = FakeSession()
        client = HttpClient(timeout=3, default_headers={"User-Agent": "t"}, session=session)

        response = client.get("http://example.test/x")

        assert response.status_code == 404
        assert not response.ok
        assert response.text == "missing"
        assert session.kwargs["timeout"] == 3
        assert session.kwargs["headers"]["User-Agent"] == "t"
        with pytest.raises(HttpError):
            response.raise_for_status()

    def test_transport_error_raises(self):
        client = HttpClient(session=FakeSession(error=requests.ConnectionError("refused")))
        with pytest.raises(HttpError, match="refused"):
            client.post("http://example.test/x", json={})

    def test_close(self):
        session = FakeSession()
        with HttpClient(session=session) as client:
            client.get("http://example.test/")
        assert session.closed
