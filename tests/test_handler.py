import base64

import pytest

from wxstrip import handler as handler_module
from wxstrip.sources.base import FetchError


class DummyRunner:
    def __init__(self, config=None, **kwargs):
        self.config = config

    def base64_png(self) -> str:
        return base64.b64encode(b"\x89PNG fake").decode("ascii")


class FailingRunner(DummyRunner):
    def base64_png(self) -> str:
        raise FetchError("forecast unavailable")


def test_handler_returns_base64_png(monkeypatch):
    monkeypatch.setattr("wxstrip.handler.StripRunner", DummyRunner)
    response = handler_module.handler({}, None)
    assert response["statusCode"] == 200
    assert response["headers"] == {"Content-Type": "image/png"}
    assert response["isBase64Encoded"] is True
    assert base64.b64decode(response["body"]) == b"\x89PNG fake"


def test_handler_propagates_fatal_errors(monkeypatch):
    monkeypatch.setattr("wxstrip.handler.StripRunner", FailingRunner)
    with pytest.raises(FetchError):
        handler_module.handler()
