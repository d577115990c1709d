import time
import logging
from dataclasses import dataclass
from typing import Optional

from services.ai_service import generate_comment
from utils.errors import AppError, ValidationError

logger = logging.getLogger(__name__)

CANCELLED = "cancelled"


@dataclass
class CommentResult:
    path: Optional[str]
    filename: Optional[str] = None
    originalname: Optional[str] = None
    comment: Optional[str] = None
    error: Optional[str] = None

    @property
    def success(self):
        return self.error is None

    def to_dict(self):
        body = {
            "success": self.success,
            "filename": self.filename,
            "originalname": self.originalname,
            "path": self.path,
        }
        if self.success:
            body["comment"] = self.comment
        else:
            body["error"] = self.error
        return body


def validate_batch(files, max_files):
    if not files or not isinstance(files, list):
        raise ValidationError("Missing image file list")
    if len(files) > max_files:
        raise ValidationError(f"Too many images (max {max_files})")


def generate_batch(files, instruction, client, encode_image, delay=0.5,
                   cancel=None, sleep=time.sleep):
    """Generate one comment per image, strictly one AI call at a time.

    ``encode_image(path)`` turns an item's path into an image reference.
    A failing item is recorded and the loop moves on; ``delay`` seconds pass
    between consecutive AI calls. Once ``cancel`` (a ``threading.Event``) is
    set, the remaining items are marked cancelled without calling the AI.
    """
    results = []
    called = False

    for index, item in enumerate(files):
        item = item if isinstance(item, dict) else {}
        result = CommentResult(
            path=item.get("path"),
            filename=item.get("filename"),
            originalname=item.get("originalname"),
        )
        results.append(result)

        if cancel is not None and cancel.is_set():
            result.error = CANCELLED
            continue

        if not result.path:
            result.error = "Missing image path"
            continue
        if not isinstance(result.path, str):
            result.error = "Invalid image path"
            continue

        try:
            image_ref = encode_image(result.path)
        except AppError as e:
            logger.warning("batch item %d (%s) skipped: %s", index, result.path, e.message)
            result.error = e.message
            continue
        except Exception as e:
            logger.exception("batch item %d (%s) could not be read", index, result.path)
            result.error = str(e) or type(e).__name__
            continue

        if called and delay:
            sleep(delay)
        if cancel is not None and cancel.is_set():
            result.error = CANCELLED
            continue
        called = True

        try:
            outcome = generate_comment(client, image_ref.value, instruction)
            result.comment = outcome.comment
        except AppError as e:
            logger.warning("batch item %d (%s) failed: %s", index, result.path, e.message)
            result.error = e.message
        except Exception as e:
            logger.exception("batch item %d (%s) failed unexpectedly", index, result.path)
            result.error = str(e) or type(e).__name__

    ok = sum(1 for r in results if r.success)
    logger.info("batch comments done: %d/%d succeeded", ok, len(results))
    return results
