import base64
import json
from urllib.parse import unquote, urlsplit


class StaticCredentials:
    def __init__(self, token="gho_test"):
        self._token = token

    def token(self):
        return self._token


class FakeResponse:
    def __init__(self, status_code=200, payload=None, reason="OK", body=None):
        self.status_code = status_code
        self._payload = payload
        self.reason = reason
        if body is not None:
            self.content = body
        else:
            self.content = b"" if payload is None else json.dumps(payload).encode()

    @property
    def ok(self):
        return self.status_code < 400

    def json(self):
        if self._payload is None:
            raise ValueError("No JSON body")
        return self._payload


def not_found():
    return FakeResponse(404, {"message": "Not Found"}, reason="Not Found")


class FakeGitHub:
    """Stands in for requests.Session, serving a small in-memory GitHub."""

    def __init__(self):
        self.files = {}        # (owner, repo, branch, path) -> bytes
        self.dirs = set()      # (owner, repo, branch, path)
        self.large = set()     # file keys served without inline content, like files over 1 MB
        self.truncated = set() # large file keys whose raw body comes back short
        self.labels = {}       # (owner, repo) -> {name: label dict}
        self.vanishing = set() # label names deleted by "someone else" right before our delete
        self.failing = {}      # (method, label name) -> status code
        self.calls = []

    def add_file(self, owner, repo, branch, path, data):
        if isinstance(data, str):
            data = data.encode("utf-8")
        self.files[(owner, repo, branch, path)] = data

    def add_labels(self, owner, repo, *names):
        bucket = self.labels.setdefault((owner, repo), {})
        for name in names:
            bucket[name] = {"name": name, "color": "ededed", "description": ""}

    def label_names(self, owner, repo):
        return set(self.labels.get((owner, repo), {}))

    def request(self, method, url, headers=None, timeout=None, params=None, json=None):
        self.calls.append({"method": method, "url": url, "headers": headers,
                           "params": params, "json": json})
        parts = urlsplit(url).path.strip("/").split("/")
        if len(parts) < 4 or parts[0] != "repos":
            return not_found()
        owner, repo, kind, rest = parts[1], parts[2], parts[3], parts[4:]
        if kind == "contents":
            return self._contents(owner, repo, (params or {}).get("ref"),
                                  unquote("/".join(rest)), headers or {})
        if kind == "labels":
            return self._labels(method, owner, repo, unquote(rest[0]) if rest else None, json)
        return not_found()

    def _contents(self, owner, repo, ref, path, headers):
        key = (owner, repo, ref, path)
        if key in self.dirs:
            return FakeResponse(200, [{"type": "file", "name": "a", "path": f"{path}/a"}])
        if key in self.files and headers.get("Accept") == "application/vnd.github.raw":
            data = self.files[key]
            if key in self.truncated:
                data = data[: len(data) // 2]
            return FakeResponse(200, body=data)
        if key in self.large:
            return FakeResponse(200, {
                "type": "file",
                "path": path,
                "size": len(self.files[key]),
                "encoding": "none",
                "content": "",
            })
        if key in self.files:
            return FakeResponse(200, {
                "type": "file",
                "path": path,
                "encoding": "base64",
                "content": base64.encodebytes(self.files[key]).decode("ascii"),
            })
        return not_found()

    def _labels(self, method, owner, repo, name, payload):
        if (owner, repo) not in self.labels:
            return not_found()
        bucket = self.labels[(owner, repo)]
        label_name = name or (payload or {}).get("name")
        status = self.failing.get((method, label_name))
        if status:
            return FakeResponse(status, {"message": "Server Error"}, reason="Server Error")

        if method == "GET":
            return FakeResponse(200, list(bucket.values()))
        if method == "POST":
            if payload["name"] in bucket:
                return FakeResponse(422, {
                    "message": "Validation Failed",
                    "errors": [{"resource": "Label", "code": "already_exists", "field": "name"}],
                })
            bucket[payload["name"]] = dict(payload)
            return FakeResponse(201, dict(payload))
        if method == "DELETE":
            if name in self.vanishing:
                self.vanishing.discard(name)
                bucket.pop(name, None)
            if name not in bucket:
                return not_found()
            del bucket[name]
            return FakeResponse(204)
        return not_found()
