"""
Local dev server for the function app.

Serves /embed and /upload-base64 (with or without the /api prefix) on PORT,
converting each request into an azure.functions.HttpRequest and calling
the same handlers the Functions host does.

    python -m shared.local_server
"""

import logging
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Callable, Dict, Tuple
from urllib.parse import parse_qs, urlsplit

import azure.functions as func

import embed
import upload_base64
from .config import Settings, get_settings

Handler = Callable[[func.HttpRequest, Settings], func.HttpResponse]

ROUTES: Dict[Tuple[str, str], Handler] = {
    ("GET", "/embed"): embed.handle,
    ("POST", "/upload-base64"): upload_base64.handle,
}


def _route_path(path: str) -> str:
    if path.startswith("/api/"):
        path = path[len("/api"):]
    return path.rstrip("/") or "/"


def to_function_request(method: str, url: str, headers: Dict[str, str], body: bytes) -> func.HttpRequest:
    # keep_blank_values so ?title= reaches the resolver as "" (hidden)
    query = parse_qs(urlsplit(url).query, keep_blank_values=True)
    params = {key: values[0] for key, values in query.items()}
    return func.HttpRequest(method=method, url=url, headers=headers, params=params, body=body)


def create_handler(settings: Settings, routes: Dict[Tuple[str, str], Handler] = ROUTES):
    class FunctionRequestHandler(BaseHTTPRequestHandler):
        def _dispatch(self):
            path = _route_path(urlsplit(self.path).path)
            handler = routes.get((self.command, path))
            if handler is None:
                if any(p == path for _, p in routes):
                    self._send(func.HttpResponse("Method not allowed", status_code=405, mimetype="text/plain"))
                else:
                    self._send(func.HttpResponse("Not found", status_code=404, mimetype="text/plain"))
                return

            try:
                length = int(self.headers.get("Content-Length", "0") or "0")
                if length < 0:
                    raise ValueError(length)
            except ValueError:
                logging.warning("[Local] Bad Content-Length: %s", self.headers.get("Content-Length"))
                self._send(func.HttpResponse("Invalid Content-Length", status_code=400, mimetype="text/plain"))
                return
            body = self.rfile.read(length) if length else b""
            url = f"http://{self.headers.get('Host', 'localhost')}{self.path}"
            req = to_function_request(self.command, url, dict(self.headers), body)
            self._send(handler(req, settings))

        def _send(self, resp: func.HttpResponse):
            payload = resp.get_body()
            content_type = resp.headers.get("Content-Type") or f"{resp.mimetype}; charset={resp.charset}"

            self.send_response(resp.status_code)
            for key, value in resp.headers.items():
                if key.lower() not in ("content-type", "content-length"):
                    self.send_header(key, value)
            self.send_header("Content-Type", content_type)
            self.send_header("Content-Length", str(len(payload)))
            self.end_headers()
            self.wfile.write(payload)

        def do_GET(self):
            self._dispatch()

        def do_POST(self):
            self._dispatch()

        def log_message(self, format, *args):
            logging.info("[Local] %s - %s", self.address_string(), format % args)

    return FunctionRequestHandler


def serve(settings: Settings) -> None:
    server = ThreadingHTTPServer(("", settings.port), create_handler(settings))
    logging.info("[Local] Server running on http://localhost:%d", settings.port)
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        pass
    finally:
        server.server_close()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")
    serve(get_settings())
