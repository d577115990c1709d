import io
import mimetypes

from flask import Blueprint, abort, send_file

import config
from utils.context import get_store
from utils.errors import NotFoundError
from utils.storage import join_key

static_bp = Blueprint("static_assets", __name__)

TEMPLATE_KINDS = {"base": config.BASE_TEMPLATE_DIR, "user": config.USER_TEMPLATE_DIR}


def _send(directory, filename):
    key = join_key(directory, filename)
    try:
        data = get_store().read_bytes(key)
    except NotFoundError:
        abort(404)

    mimetype = mimetypes.guess_type(filename)[0] or "application/octet-stream"
    return send_file(io.BytesIO(data), mimetype=mimetype, download_name=filename)


@static_bp.get("/uploads/<filename>")
def serve_upload(filename):
    return _send(config.UPLOAD_DIR, filename)


@static_bp.get("/generated/<filename>")
def serve_generated(filename):
    return _send(config.GENERATED_DIR, filename)


@static_bp.get("/templates/<kind>/<filename>")
def serve_template(kind, filename):
    if kind not in TEMPLATE_KINDS:
        abort(404)
    return _send(TEMPLATE_KINDS[kind], filename)


@static_bp.get("/fonts/<filename>")
def serve_font(filename):
    return _send(config.FONT_DIR, filename)


@static_bp.get("/emojis/<filename>")
def serve_emoji(filename):
    return _send(config.EMOJI_DIR, filename)
