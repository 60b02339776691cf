"""Tests for the local dev server adapter."""

import http.client
import json
import threading
from http.server import ThreadingHTTPServer
from urllib import error, request

import pytest

from shared.config import Settings
from shared.local_server import _route_path, create_handler, to_function_request


class TestRequestAdapter:
    def test_blank_values_are_kept(self):
        req = to_function_request("GET", "http://localhost/embed?title=&text=VGVzdA", {}, b"")
        assert req.params["title"] == ""
        assert req.params["text"] == "VGVzdA"
        assert "siteName" not in req.params

    def test_query_is_percent_decoded_once(self):
        req = to_function_request("GET", "http://localhost/embed?img=https%253A%252F%252Fa", {}, b"")
        assert req.params["img"] == "https%3A%2F%2Fa"

    @pytest.mark.parametrize(
        "path,expected",
        [("/embed", "/embed"), ("/api/embed", "/embed"), ("/upload-base64/", "/upload-base64")],
    )
    def test_route_path(self, path, expected):
        assert _route_path(path) == expected


@pytest.fixture
def server():
    settings = Settings(port=0, default_title="Local")
    httpd = ThreadingHTTPServer(("127.0.0.1", 0), create_handler(settings))
    thread = threading.Thread(target=httpd.serve_forever, daemon=True)
    thread.start()
    yield f"http://127.0.0.1:{httpd.server_address[1]}"
    httpd.shutdown()
    httpd.server_close()


class TestLocalServer:
    def test_embed(self, server):
        with request.urlopen(f"{server}/embed?title=VGVzdA") as resp:
            assert resp.status == 200
            assert resp.headers["Content-Type"].startswith("text/html")
            assert "<h1>Test</h1>" in resp.read().decode("utf-8")

    def test_api_prefix(self, server):
        with request.urlopen(f"{server}/api/embed") as resp:
            assert "<h1>Local</h1>" in resp.read().decode("utf-8")

    def test_upload_validation(self, server):
        req = request.Request(
            f"{server}/upload-base64",
            data=json.dumps({"data": "AAEC"}).encode("utf-8"),
            headers={"Content-Type": "application/json"},
            method="POST",
        )
        with pytest.raises(error.HTTPError) as exc:
            request.urlopen(req)
        assert exc.value.code == 400
        assert json.loads(exc.value.read()) == {"error": "Missing filename or data"}

    def test_unknown_path(self, server):
        with pytest.raises(error.HTTPError) as exc:
            request.urlopen(f"{server}/nope")
        assert exc.value.code == 404

    def test_wrong_method(self, server):
        with pytest.raises(error.HTTPError) as exc:
            request.urlopen(f"{server}/upload-base64")
        assert exc.value.code == 405

    @pytest.mark.parametrize("length", ["abc", "-1"])
    def test_bad_content_length(self, server, length):
        host, port = server[len("http://"):].split(":")
        conn = http.client.HTTPConnection(host, int(port), timeout=5)
        try:
            conn.putrequest("POST", "/upload-base64")
            conn.putheader("Content-Length", length)
            conn.endheaders()
            resp = conn.getresponse()
            assert resp.status == 400
            assert resp.read() == b"Invalid Content-Length"
        finally:
            conn.close()
