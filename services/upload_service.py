import io
import os
import re
import logging

from PIL import Image, UnidentifiedImageError

import config
from utils.errors import UploadError

logger = logging.getLogger(__name__)

IMAGE_TYPES = re.compile(r"jpeg|jpg|png|gif")
EMOJI_TYPES = re.compile(r"jpeg|jpg|png|gif|webp")

FILE_TOO_LARGE = "FILE_TOO_LARGE"
NO_FILE = "NO_FILE"
BAD_TYPE = "UNSUPPORTED_TYPE"
TOO_MANY_FILES = "LIMIT_FILE_COUNT"


def _check_type(file, allowed):
    ext = os.path.splitext(file.filename or "")[1].lower()
    if not (ext and allowed.search(ext) and allowed.search(file.mimetype or "")):
        kinds = allowed.pattern.replace("|", ", ")
        raise UploadError(f"Only image files are supported: {kinds}", code=BAD_TYPE)
    return ext


def _check_image(data):
    try:
        with Image.open(io.BytesIO(data)) as img:
            img.verify()
    except (UnidentifiedImageError, OSError, SyntaxError) as e:
        raise UploadError("File content is not a valid image", code=BAD_TYPE) from e


def _prepare(file, max_mb, allowed):
    if file is None or not file.filename:
        raise UploadError("No file uploaded", code=NO_FILE)

    ext = _check_type(file, allowed)
    limit = max_mb * 1024 * 1024
    data = file.read(limit + 1)
    if len(data) > limit:
        raise UploadError(f"File exceeds the size limit (max {max_mb}MB)", code=FILE_TOO_LARGE)
    _check_image(data)
    return ext, data


def _store(store, file, directory, ext, data):
    key = store.save(directory, data, ext)
    logger.info("upload %s saved as %s", file.filename, key)
    return {
        "filename": key.rsplit("/", 1)[-1],
        "originalname": file.filename,
        "path": "/" + key,
        "size": len(data),
    }


def save_upload(store, file, directory, max_mb, allowed=IMAGE_TYPES):
    ext, data = _prepare(file, max_mb, allowed)
    return _store(store, file, directory, ext, data)


def save_image(store, file, max_mb):
    return save_upload(store, file, config.UPLOAD_DIR, max_mb)


def save_images(store, files, max_mb, max_files):
    """Validate every file first so a bad one doesn't leave half a batch stored."""
    files = [f for f in files if f and f.filename]
    if not files:
        raise UploadError("No file uploaded", code=NO_FILE)
    if len(files) > max_files:
        raise UploadError(f"Too many files (max {max_files})", code=TOO_MANY_FILES)

    prepared = [(f, *_prepare(f, max_mb, IMAGE_TYPES)) for f in files]
    return [_store(store, f, config.UPLOAD_DIR, ext, data) for f, ext, data in prepared]


def save_template(store, file, max_mb):
    return save_upload(store, file, config.USER_TEMPLATE_DIR, max_mb)


def save_emoji(store, file, max_mb):
    return save_upload(store, file, config.EMOJI_DIR, max_mb, allowed=EMOJI_TYPES)
