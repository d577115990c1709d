import base64
from unittest.mock import MagicMock

import pytest

from services.image_encoder import NetworkClassifier, encode, is_image_key, mime_type, url_path
from utils.errors import ImageNotFound


@pytest.mark.parametrize(
    "path,expected",
    [
        ("a.jpg", "image/jpeg"),
        ("a.JPEG", "image/jpeg"),
        ("a.png", "image/png"),
        ("a.gif", "image/gif"),
        ("a.webp", "image/png"),
        ("noext", "image/png"),
    ],
)
def test_mime_type(path, expected):
    assert mime_type(path) == expected


@pytest.mark.parametrize(
    "host",
    ["localhost", "localhost:5001", "127.0.0.1:9000", "10.0.0.5", "192.168.1.20:80",
     "172.16.3.4", "[::1]:5001", "169.254.1.1", "app.localhost"],
)
def test_private_hosts(host):
    assert NetworkClassifier().is_private(host)


@pytest.mark.parametrize(
    "host", ["example.com", "api.example.com:443", "8.8.8.8", "172.32.0.1", "", "[2001:4860::8888]"]
)
def test_public_hosts(host):
    assert not NetworkClassifier().is_private(host)


def test_url_path():
    assert url_path("https://example.com/uploads/a.png?x=1") == "/uploads/a.png"
    assert url_path("/uploads/a.png") == "/uploads/a.png"


def test_private_host_uses_inline(store, put_file):
    put_file("uploads/a.png", b"\x89PNGdata")
    ref = encode(store, "/uploads/a.png", "http", "localhost:5001")

    assert ref.use_inline
    assert ref.mode == "inline"
    assert ref.value == "data:image/png;base64," + base64.b64encode(b"\x89PNGdata").decode()
    assert ref.public_url == "http://localhost:5001/uploads/a.png"


def test_public_host_uses_url(store, put_file):
    put_file("uploads/b.jpg", b"jpeg")
    ref = encode(store, "http://old-host/uploads/b.jpg", "https", "grading.example.com")

    assert ref.mode == "url"
    assert ref.value == "https://grading.example.com/uploads/b.jpg"
    assert ref.inline.startswith("data:image/jpeg;base64,")


def test_missing_host_falls_back_to_inline(store, put_file):
    put_file("uploads/c.gif", b"gif")
    ref = encode(store, "/uploads/c.gif", "https", None)
    assert ref.use_inline
    assert ref.public_url is None


def test_classifier_is_injectable(store, put_file):
    put_file("uploads/a.png")
    classifier = MagicMock()
    classifier.is_private.return_value = True

    ref = encode(store, "/uploads/a.png", "https", "example.com", classifier)

    classifier.is_private.assert_called_once_with("example.com")
    assert ref.use_inline


@pytest.mark.parametrize("url", ["/uploads/missing.png", "", "/", "https://example.com/uploads/none.png"])
def test_missing_image(store, url):
    with pytest.raises(ImageNotFound):
        encode(store, url, "https", "example.com")


@pytest.mark.parametrize(
    "url",
    ["/.env", "/config.py", "/fonts/a.png", "/uploads/../.env", "/uploads//a.png", "/uploadsx/a.png"],
)
def test_files_outside_image_dirs_are_never_read(store, put_file, url):
    put_file(".env", b"AI_API_KEY=sk-secret")
    put_file("config.py", b"secret")
    put_file("fonts/a.png")
    put_file("uploadsx/a.png")

    with pytest.raises(ImageNotFound):
        encode(store, url, "http", "localhost:5001")


@pytest.mark.parametrize(
    "key", ["uploads/a.png", "generated/a.png", "templates/base/a.png", "templates/user/a.png", "emojis/a.gif"]
)
def test_image_dirs_are_allowed(key):
    assert is_image_key(key)
