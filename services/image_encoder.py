import os
import base64
import logging
import ipaddress
import posixpath
from dataclasses import dataclass
from typing import Optional
from urllib.parse import urlparse

import config
from utils.errors import ImageNotFound

logger = logging.getLogger(__name__)

MIME_TYPES = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".gif": "image/gif",
}
DEFAULT_MIME = "image/png"


class NetworkClassifier:
    """Decides whether a request host is reachable from the public internet."""

    LOCAL_NAMES = {"localhost", "localhost.localdomain"}

    def is_private(self, host: str) -> bool:
        hostname = _strip_port(host).lower()
        if not hostname:
            return False
        if hostname in self.LOCAL_NAMES or hostname.endswith(".localhost"):
            return True
        try:
            addr = ipaddress.ip_address(hostname)
        except ValueError:
            return False
        return addr.is_private or addr.is_loopback or addr.is_link_local


def _strip_port(host: str) -> str:
    host = (host or "").strip()
    if host.startswith("["):
        # [::1]:5001
        return host[1:].split("]", 1)[0]
    if host.count(":") == 1:
        return host.split(":", 1)[0]
    return host


@dataclass(frozen=True)
class ImageReference:
    inline: str
    public_url: Optional[str]
    use_inline: bool

    @property
    def value(self) -> str:
        return self.inline if self.use_inline else self.public_url

    @property
    def mode(self) -> str:
        return "inline" if self.use_inline else "url"


def url_path(image_url: str) -> str:
    """Path part of ``image_url``; absolute URLs are reduced to their path."""
    if image_url.startswith(("http://", "https://")):
        return urlparse(image_url).path
    return image_url


def mime_type(path: str) -> str:
    return MIME_TYPES.get(os.path.splitext(path)[1].lower(), DEFAULT_MIME)


def build_public_url(scheme, host, path):
    if not host:
        return None
    return f"{scheme or 'https'}://{host}{path}"


def is_image_key(key: str) -> bool:
    """Only files inside the image asset directories may leave the server."""
    if not key or posixpath.normpath(key) != key:
        return False
    return any(key.startswith(d + "/") for d in config.IMAGE_DIRS)


def encode(store, image_url, scheme, host, classifier=None) -> ImageReference:
    path = url_path(image_url)
    key = path.lstrip("/")

    if not is_image_key(key) or not store.exists(key):
        logger.error("image file not found: %s", path)
        raise ImageNotFound(path)

    data = store.read_bytes(key)
    inline = f"data:{mime_type(key)};base64,{base64.b64encode(data).decode('ascii')}"

    public_url = build_public_url(scheme, host, path)

    classifier = classifier or NetworkClassifier()
    if classifier.is_private(host or ""):
        # the AI service can't reach a private host
        logger.info("private host %s, sending image inline", host)
        return ImageReference(inline, public_url, use_inline=True)

    if public_url is None:
        return ImageReference(inline, None, use_inline=True)

    logger.info("public host, sending image url %s", public_url)
    return ImageReference(inline, public_url, use_inline=False)
