"""Tests for the api and demo commands."""

import json

import httpx
import pytest

from openfga_demo.cli import demo
from openfga_demo.cli.__main__ import build_parser
from openfga_demo.cli.api_test import (
    DEFAULT_PAYLOAD,
    ResourcePath,
    UnknownActionError,
    load_payload,
    make_request,
    run_action,
)
from openfga_demo.cli.output import StatusBucket, classify_status

BASE_URL = "http://api.test"


class Recorder:
    """MockTransport handler that records requests and answers with JSON."""

    def __init__(self, status_code: int = 200):
        self.status_code = status_code
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status_code, json={"ok": True})


def unreachable(request: httpx.Request) -> httpx.Response:
    raise httpx.ConnectError("connection refused", request=request)


@pytest.mark.parametrize(
    "status_code, bucket",
    [
        (200, StatusBucket.SUCCESS),
        (201, StatusBucket.SUCCESS),
        (403, StatusBucket.CLIENT_ERROR),
        (500, StatusBucket.SERVER_ERROR),
        (302, StatusBucket.UNEXPECTED),
    ],
)
def test_classify_status(status_code: int, bucket: StatusBucket) -> None:
    assert classify_status(status_code) is bucket


def test_resource_path_url() -> None:
    path = ResourcePath("my-app", "api", "org-2", "bob-resource")

    assert path.url("http://localhost:5001/") == (
        "http://localhost:5001/api/resource/my-app/api/org-2/bob-resource"
    )


class TestLoadPayload:
    def test_default_for_post_and_put(self) -> None:
        assert json.loads(load_payload("POST", None)) == DEFAULT_PAYLOAD
        assert json.loads(load_payload("PUT", None)) == DEFAULT_PAYLOAD
        assert load_payload("GET", None) is None

    def test_payload_file(self, tmp_path) -> None:
        path = tmp_path / "payload.json"
        path.write_text('{"description": "custom"}')

        assert load_payload("POST", path) == b'{"description": "custom"}'

    def test_missing_file_falls_back(self, tmp_path) -> None:
        assert json.loads(load_payload("PUT", tmp_path / "missing.json")) == DEFAULT_PAYLOAD


class TestMakeRequest:
    def test_sends_user_header_and_body(self) -> None:
        recorder = Recorder(201)
        with httpx.Client(transport=httpx.MockTransport(recorder)) as client:
            response = make_request(client, "POST", f"{BASE_URL}/api/resource/a/b/c/d", "alice")

        assert response.status_code == 201
        [request] = recorder.requests
        assert request.headers["X-User-Id"] == "alice"
        assert request.headers["Content-Type"] == "application/json"
        assert json.loads(request.content) == DEFAULT_PAYLOAD

    def test_without_user(self) -> None:
        recorder = Recorder(401)
        with httpx.Client(transport=httpx.MockTransport(recorder)) as client:
            response = make_request(client, "GET", f"{BASE_URL}/api/resource/a/b/c/d")

        assert response.status_code == 401
        assert "X-User-Id" not in recorder.requests[0].headers

    def test_unreachable_server(self) -> None:
        with httpx.Client(transport=httpx.MockTransport(unreachable)) as client:
            assert make_request(client, "GET", f"{BASE_URL}/health") is None

    def test_non_json_body(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(502, text="[bad gateway]")

        with httpx.Client(transport=httpx.MockTransport(handler)) as client:
            response = make_request(client, "GET", f"{BASE_URL}/health")

        assert response.status_code == 502


class TestRunAction:
    def test_public_action_sends_no_user(self) -> None:
        recorder = Recorder()
        with httpx.Client(transport=httpx.MockTransport(recorder)) as client:
            run_action(client, BASE_URL, "alice", "health")

        [request] = recorder.requests
        assert request.url.path == "/health"
        assert "X-User-Id" not in request.headers

    @pytest.mark.parametrize(
        "action, method",
        [("create", "POST"), ("get", "GET"), ("update", "PUT"), ("delete", "DELETE")],
    )
    def test_resource_actions(self, action: str, method: str) -> None:
        recorder = Recorder()
        with httpx.Client(transport=httpx.MockTransport(recorder)) as client:
            run_action(client, BASE_URL, "bob", action, ResourcePath(name="x"))

        [request] = recorder.requests
        assert request.method == method
        assert request.url.path == "/api/resource/my-service/web/org-1/x"
        assert request.headers["X-User-Id"] == "bob"
        if method in ("GET", "DELETE"):
            assert request.content == b""

    def test_unknown_action(self) -> None:
        with httpx.Client(transport=httpx.MockTransport(Recorder())) as client:
            with pytest.raises(UnknownActionError):
                run_action(client, BASE_URL, "alice", "explode")


def test_cmd_api_unknown_action() -> None:
    args = build_parser().parse_args(["--base-url", BASE_URL, "api", "alice", "explode"])

    assert args.handler(args) == 1


def test_api_parser_defaults() -> None:
    args = build_parser().parse_args(["api", "alice", "create"])

    assert (args.service_name, args.service_type, args.org_id, args.resource_name) == (
        "my-service", "web", "org-1", "my-resource"
    )
    assert args.payload_file is None


class TestDemo:
    def test_runs_every_step(self) -> None:
        recorder = Recorder()
        with httpx.Client(transport=httpx.MockTransport(recorder)) as client:
            assert demo.run_demo(client, BASE_URL) == 0

        step_count = sum(len(steps) for _, steps in demo.STEPS)
        assert len(recorder.requests) == step_count + 2

        missing, empty = recorder.requests[-2:]
        assert "X-User-Id" not in missing.headers
        assert empty.headers["X-User-Id"] == ""

        bob_create = next(
            r for r in recorder.requests
            if r.method == "POST" and r.headers.get("X-User-Id") == "bob"
        )
        assert bob_create.url.path == "/api/resource/my-app/api/org-2/bob-resource"

    def test_custom_payloads_are_sent(self) -> None:
        recorder = Recorder()
        with httpx.Client(transport=httpx.MockTransport(recorder)) as client:
            demo.run_demo(client, BASE_URL)

        charlie = [r for r in recorder.requests if r.headers.get("X-User-Id") == "charlie"]
        expected = (demo.PAYLOADS_DIR / "create-resource.json").read_bytes()
        assert charlie[0].content == expected

    def test_counts_unreachable_requests(self) -> None:
        with httpx.Client(transport=httpx.MockTransport(unreachable)) as client:
            missed = demo.run_demo(client, BASE_URL)

        assert missed == sum(len(steps) for _, steps in demo.STEPS) + 2
