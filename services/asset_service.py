import os
import re
import logging
from enum import Enum
from dataclasses import dataclass
from datetime import datetime, timezone

from werkzeug.utils import secure_filename

import config
from utils.errors import NotFoundError, ValidationError
from utils.storage import join_key

logger = logging.getLogger(__name__)

TEMPLATE_EXTS = {".png", ".jpg", ".jpeg", ".gif"}
EMOJI_EXTS = {".jpg", ".jpeg", ".png", ".gif", ".webp"}
FONT_EXTS = {".ttf", ".otf", ".woff", ".woff2"}

# licence marker some bundled font files carry in their filename
_LICENCE_MARK = re.compile(r"\(商用需授权\)")

DEFAULT_FONT = {
    "name": "Microsoft YaHei",
    "filename": "default",
    "path": "default",
    "displayName": "微软雅黑（默认）",
}

PRESET_COMMENTS = [
    "完成得很好，继续保持！",
    "进步明显，值得表扬！",
    "思路清晰，表达准确！",
    "书写工整，态度认真！",
    "还需继续努力！",
    "知识点掌握较好！",
    "可以再仔细一些！",
    "整体表现优秀！",
]


class Provenance(str, Enum):
    BUILTIN = "builtin"
    USER = "user"


@dataclass(frozen=True)
class Asset:
    name: str
    path: str
    provenance: Provenance

    def to_dict(self):
        return {
            "name": self.name,
            "path": self.path,
            "type": "user" if self.provenance is Provenance.USER else "base",
        }


def _ext(filename):
    return os.path.splitext(filename)[1].lower()


def _scan(store, directory, exts):
    return [f for f in store.list(directory) if _ext(f) in exts]


def _templates_in(store, directory, provenance):
    return [
        Asset(name=f, path="/" + join_key(directory, f), provenance=provenance)
        for f in _scan(store, directory, TEMPLATE_EXTS)
    ]


def list_templates(store):
    return {
        "base": _templates_in(store, config.BASE_TEMPLATE_DIR, Provenance.BUILTIN),
        "user": _templates_in(store, config.USER_TEMPLATE_DIR, Provenance.USER),
    }


def all_templates(store):
    """Builtin templates first, then user templates, each in filename order."""
    groups = list_templates(store)
    return groups["base"] + groups["user"]


def list_emojis(store):
    emojis = []
    for f in _scan(store, config.EMOJI_DIR, EMOJI_EXTS):
        size, mtime = store.stat(join_key(config.EMOJI_DIR, f))
        emojis.append({
            "filename": f,
            "path": "/" + join_key(config.EMOJI_DIR, f),
            "size": size,
            "uploadTime": datetime.fromtimestamp(mtime, tz=timezone.utc).isoformat(),
            "_mtime": mtime,
        })

    # newest first; sort is stable so equal times keep filename order
    emojis.sort(key=lambda e: e["_mtime"], reverse=True)
    for e in emojis:
        del e["_mtime"]
    return emojis


def font_display_name(filename):
    stem = os.path.splitext(filename)[0]
    return _LICENCE_MARK.sub("", stem).strip()


def list_fonts(store):
    fonts = [dict(DEFAULT_FONT)]
    for f in _scan(store, config.FONT_DIR, FONT_EXTS):
        name = font_display_name(f)
        fonts.append({
            "name": name,
            "filename": f,
            "path": "/" + join_key(config.FONT_DIR, f),
            "displayName": name,
        })
    return fonts


def _safe_name(filename):
    safe = secure_filename(filename or "")
    if not safe or safe != filename:
        raise ValidationError(f"Invalid filename: {filename}")
    return safe


def delete_user_template(store, filename):
    key = join_key(config.USER_TEMPLATE_DIR, _safe_name(filename))
    if not store.exists(key):
        raise NotFoundError("Template not found")
    store.remove(key)
    logger.info("deleted user template %s", filename)


def delete_emoji(store, filename):
    key = join_key(config.EMOJI_DIR, _safe_name(filename))
    if not store.exists(key):
        raise NotFoundError("Emoji not found")
    store.remove(key)
    logger.info("deleted emoji %s", filename)
