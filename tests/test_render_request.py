import pytest

from utils.errors import EmptyPayload
from utils.qr_config import normalize
from utils.render_request import build_render_request


def test_empty_payload_is_rejected():
    with pytest.raises(EmptyPayload):
        build_render_request("", normalize({}), "png")


def test_png_request():
    req = build_render_request("abc", normalize({}), "png")
    assert req.format is None
    assert req.size == "300x300"
    assert req.media_type == "image/png"
    assert req.url == (
        "https://api.qrserver.com/v1/create-qr-code/"
        "?size=300x300&data=abc&color=000000&bgcolor=ffffff&ecc=M"
    )


def test_svg_request_has_format_suffix():
    req = build_render_request("abc", normalize({}), "svg")
    assert req.format == "svg"
    assert req.url.endswith("&format=svg")
    assert req.file_extension == "svg"
    assert req.media_type == "image/svg+xml"


def test_payload_is_percent_encoded_once():
    payload = "WIFI:T:WPA;S:Home;P:a b;H:false;;"
    req = build_render_request(payload, normalize({"size": 200, "errorCorrection": "H"}))
    assert req.data == "WIFI%3AT%3AWPA%3BS%3AHome%3BP%3Aa%20b%3BH%3Afalse%3B%3B"
    assert "data=WIFI%3AT" in req.url
    assert "%25" not in req.url
    assert "size=200x200" in req.url and "ecc=H" in req.url


def test_custom_base_url_with_query():
    req = build_render_request("x", None, "png", base_url="https://render.local/qr?key=1")
    assert req.url.startswith("https://render.local/qr?key=1&size=300x300")
