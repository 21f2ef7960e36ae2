"""
auth — GitHub OAuth login through a one-shot local callback server.

The browser is sent to GitHub's authorize page; GitHub redirects back to
http://localhost:<port>/callback?code=..., where a short-lived FastAPI app
(served by uvicorn in a helper thread) exchanges the code for a token,
stores it and hands the result to the waiting caller.
"""

import contextlib
import html
import threading
import time
import webbrowser
from typing import Optional
from urllib.parse import urlencode

import requests
import uvicorn
from fastapi import FastAPI
from fastapi.responses import HTMLResponse

from .config import (
    AUTHORIZE_URL, TOKEN_URL, OAUTH_SCOPES, CALLBACK_PORT, login_timeout,
    HTTP_TIMEOUT, oauth_credentials,
)
from .ui import info, ok, warn


class OAuthError(Exception):
    """The OAuth flow could not produce a token."""


# ═════════════════════════════════════════════════════════════════════════════
# RESULT CHANNEL
# ═════════════════════════════════════════════════════════════════════════════

class OneShot:
    """Holds the first outcome delivered to it; later ones are ignored."""

    def __init__(self):
        self._event = threading.Event()
        self._lock = threading.Lock()
        self._token = None
        self._error = None

    @property
    def done(self):
        return self._event.is_set()

    def resolve(self, token):
        return self._settle(token, None)

    def reject(self, exc):
        return self._settle(None, exc)

    def _settle(self, token, exc):
        with self._lock:
            if self._event.is_set():
                return False
            self._token = token
            self._error = exc
            self._event.set()
            return True

    def wait(self, timeout=None):
        if not self._event.wait(timeout):
            raise OAuthError(
                f"Timed out after {timeout:g}s waiting for GitHub authorization."
            )
        if self._error is not None:
            raise self._error
        return self._token


# ═════════════════════════════════════════════════════════════════════════════
# GITHUB ENDPOINTS
# ═════════════════════════════════════════════════════════════════════════════

def authorize_url(client_id, redirect_uri, scopes=OAUTH_SCOPES):
    query = urlencode({
        "client_id": client_id,
        "scope": scopes,
        "redirect_uri": redirect_uri,
    })
    return f"{AUTHORIZE_URL}?{query}"


def exchange_code(client_id, client_secret, code, session=None):
    """Trade an authorization code for an access token."""
    http = session or requests
    try:
        r = http.post(
            TOKEN_URL,
            json={
                "client_id": client_id,
                "client_secret": client_secret,
                "code": code,
            },
            headers={"Accept": "application/json"},
            timeout=HTTP_TIMEOUT,
        )
    except requests.RequestException as exc:
        raise OAuthError(f"Could not reach GitHub: {exc}") from exc

    try:
        data = r.json()
    except ValueError:
        data = {}
    if not isinstance(data, dict):
        data = {}

    token = data.get("access_token")
    if r.ok and token:
        return token
    raise OAuthError(
        data.get("error_description")
        or data.get("error")
        or f"Failed to get access token from GitHub (HTTP {r.status_code})."
    )


# ═════════════════════════════════════════════════════════════════════════════
# CALLBACK SERVER
# ═════════════════════════════════════════════════════════════════════════════

_PAGE = """<!doctype html>
<html><head><meta charset="utf-8"><title>repo-ready</title></head>
<body style="font-family: sans-serif; margin: 4em;">
<h1>{title}</h1><p>{detail}</p>{script}
</body></html>"""


def _page(title, detail="", close=False, status_code=200):
    script = "<script>window.close();</script>" if close else ""
    return HTMLResponse(
        _PAGE.format(title=html.escape(title), detail=html.escape(detail), script=script),
        status_code=status_code,
    )


def create_callback_app(exchange, store, outcome):
    """
    Build the callback app. `exchange(code)` returns a token or raises
    OAuthError; the token is saved with `store.store` and the result is
    delivered through `outcome`.
    """
    app = FastAPI(title="repo-ready login", docs_url=None, redoc_url=None,
                  openapi_url=None)

    @app.get("/callback")
    def callback(code: Optional[str] = None):
        if outcome.done:
            return _page("This login has already completed.",
                         "You can close this tab.", status_code=409)
        if not code:
            outcome.reject(OAuthError("No authorization code received."))
            return _page("Authentication failed: No code received.",
                         status_code=400)
        try:
            token = exchange(code)
            try:
                store.store(token)
            except OSError as exc:
                raise OAuthError(f"Failed to save GitHub token: {exc}") from exc
        except OAuthError as exc:
            outcome.reject(exc)
            return _page(f"Authentication failed: {exc}", status_code=500)

        outcome.resolve(token)
        return _page("Authentication successful!", "You can close this tab.",
                     close=True)

    return app


@contextlib.contextmanager
def serving(app, port):
    """Run `app` on 127.0.0.1:`port` for the duration of the block."""
    server = uvicorn.Server(
        uvicorn.Config(app, host="127.0.0.1", port=port, log_level="warning")
    )
    thread = threading.Thread(target=server.run, name="repo-ready-callback",
                              daemon=True)
    thread.start()
    try:
        while not server.started:
            if not thread.is_alive():
                raise OAuthError(
                    f"Could not start the local callback server on port {port}."
                )
            time.sleep(0.05)
        yield server
    finally:
        server.should_exit = True
        thread.join()


# ═════════════════════════════════════════════════════════════════════════════
# FLOW
# ═════════════════════════════════════════════════════════════════════════════

def run_oauth_flow(store, *, port=CALLBACK_PORT, timeout=None,
                   opener=None, session=None):
    """Log in through the browser and return the new access token."""
    client_id, client_secret = oauth_credentials()
    if timeout is None:
        timeout = login_timeout()
    opener = opener or webbrowser.open
    redirect_uri = f"http://localhost:{port}/callback"
    url = authorize_url(client_id, redirect_uri)

    outcome = OneShot()
    app = create_callback_app(
        lambda code: exchange_code(client_id, client_secret, code, session=session),
        store,
        outcome,
    )

    with serving(app, port):
        info("Opening your browser to GitHub for authentication...")
        try:
            opened = opener(url)
        except webbrowser.Error as exc:
            warn(f"Failed to open browser: {exc}")
            opened = False
        if not opened:
            warn(f"Open this URL to continue:\n     {url}")
        token = outcome.wait(timeout)

    ok("GitHub authentication completed.")
    return token


class Credentials:
    """
    Supplies the GitHub token for one run: the stored token if there is one,
    otherwise the result of a fresh login. Resolved once, then cached.
    """

    def __init__(self, store, login=None):
        self.store = store
        self._login = login or (lambda: run_oauth_flow(store))
        self._token = None

    def token(self):
        if self._token is None:
            self._token = self.store.retrieve()
        if self._token is None:
            warn("GitHub token not found. Initiating login...")
            self._token = self._login()
        return self._token
