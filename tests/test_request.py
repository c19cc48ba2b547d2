import pytest

from simple_api.errors import ErrorKind, MalformedEndpointError
from simple_api.model import HttpMethod
from simple_api.request import build_request, encode_form, merge_headers


def test_json_request_sets_content_headers():
    descriptor = build_request(HttpMethod.POST, "https://api.example.com/items", body=b"{}")

    assert descriptor.method is HttpMethod.POST
    assert descriptor.url == "https://api.example.com/items"
    assert dict(descriptor.headers) == {
        "Content-Type": "application/json",
        "Accept": "application/json",
    }
    assert descriptor.body == b"{}"


def test_form_request_has_no_accept_override():
    descriptor = build_request(
        "post", "https://api.example.com/login", body=b"a=1", form=True
    )

    assert dict(descriptor.headers) == {"Content-Type": "application/x-www-form-urlencoded"}
    assert "Accept" not in descriptor.headers


def test_get_request_drops_body():
    descriptor = build_request("GET", "http://echo.example/test?key=value", body=b"ignored")

    assert descriptor.method is HttpMethod.GET
    assert descriptor.body is None
    assert descriptor.url == "http://echo.example/test?key=value"


def test_header_precedence_base_then_authorization_then_call():
    descriptor = build_request(
        HttpMethod.GET,
        "https://api.example.com/me",
        authorization={"Authorization": "Bearer global", "Accept": "text/plain"},
        headers={"authorization": "Bearer per-call", "X-Trace": "abc"},
    )

    assert dict(descriptor.headers) == {
        "Content-Type": "application/json",
        "Accept": "text/plain",
        "authorization": "Bearer per-call",
        "X-Trace": "abc",
    }


def test_client_defaults_sit_between_authorization_and_call_headers():
    descriptor = build_request(
        HttpMethod.GET,
        "https://api.example.com/me",
        authorization={"X-Tenant": "from-auth"},
        defaults={"X-Tenant": "from-defaults", "User-Agent": "simple-api"},
        headers={"User-Agent": "custom"},
    )

    assert descriptor.headers["X-Tenant"] == "from-defaults"
    assert descriptor.headers["User-Agent"] == "custom"


def test_construction_is_deterministic():
    kwargs = dict(
        headers={"X-A": "1"},
        body=b"payload",
        authorization={"Authorization": "Bearer t"},
    )
    first = build_request("POST", "https://api.example.com/x", **kwargs)
    second = build_request("POST", "https://api.example.com/x", **kwargs)

    assert first == second


def test_descriptor_is_immutable():
    descriptor = build_request("GET", "https://api.example.com/x")

    with pytest.raises(Exception):
        descriptor.url = "https://other.example.com"


def test_descriptor_headers_cannot_be_changed_after_build():
    descriptor = build_request("GET", "https://api.example.com/x", headers={"X-A": "1"})

    with pytest.raises(TypeError):
        descriptor.headers["X-A"] = "2"
    with pytest.raises(TypeError):
        descriptor.headers["Authorization"] = "Bearer injected"

    request = descriptor.to_httpx()
    assert request.headers["x-a"] == "1"
    assert "authorization" not in request.headers
    assert descriptor == build_request("GET", "https://api.example.com/x", headers={"X-A": "1"})


@pytest.mark.parametrize("method", ["GET", "POST"])
@pytest.mark.parametrize(
    "endpoint",
    [
        "",
        "   ",
        "not a url",
        "example.com/path",
        "/relative/path",
        "ftp://files.example.com/x",
        "http://",
        "https://exa mple.com/",
    ],
)
def test_malformed_endpoints_fail_before_io(method, endpoint):
    with pytest.raises(MalformedEndpointError) as excinfo:
        build_request(method, endpoint)

    assert excinfo.value.kind is ErrorKind.MALFORMED_ENDPOINT
    assert excinfo.value.endpoint == endpoint


def test_merge_headers_keeps_last_spelling():
    merged = merge_headers({"Accept": "a"}, None, {"ACCEPT": "b"})

    assert merged == {"ACCEPT": "b"}


def test_encode_form_from_mapping_and_pairs():
    assert encode_form({"name": "Ada Lovelace", "lang": "en"}) == b"name=Ada+Lovelace&lang=en"
    assert encode_form([("tag", "a"), ("tag", "b")]) == b"tag=a&tag=b"
    assert encode_form(b"raw=1") == b"raw=1"
    assert encode_form(None) == b""


def test_descriptor_converts_to_httpx_request():
    descriptor = build_request(
        "POST", "https://api.example.com/x", body=b'{"a": 1}', headers={"X-A": "1"}
    )

    request = descriptor.to_httpx()

    assert request.method == "POST"
    assert str(request.url) == "https://api.example.com/x"
    assert request.headers["x-a"] == "1"
    assert request.headers["content-type"] == "application/json"
    assert request.content == b'{"a": 1}'
