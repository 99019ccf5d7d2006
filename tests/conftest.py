import json

import pytest
import requests


class FakeResponse:
    """Minimal stand-in for requests.Response."""

    def __init__(self, status_code=200, body=None, text=None):
        self.status_code = status_code
        self._body = body
        self.text = text if text is not None else json.dumps(body)

    def json(self):
        return json.loads(self.text)


@pytest.fixture
def fake_post(monkeypatch):
    """Patch requests.post; returns the list of recorded calls.

    Set ``calls.response`` to a FakeResponse or an exception instance.
    """

    class Calls(list):
        response = FakeResponse(200, {"payload": {"rows": [], "absentElements": []}})

    calls = Calls()

    def _post(url, json=None, headers=None, timeout=None):
        calls.append({"url": url, "json": json, "headers": headers, "timeout": timeout})
        if isinstance(calls.response, Exception):
            raise calls.response
        return calls.response

    monkeypatch.setattr(requests, "post", _post)
    return calls

