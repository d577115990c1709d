import re
import logging
from dataclasses import dataclass

from services.template_service import (
    DEFAULT_STYLE_KEYWORDS,
    FALLBACK_STYLE,
    StyleLabel,
    classify_style,
)

logger = logging.getLogger(__name__)

STYLE_INSTRUCTION = (
    "请分析这张作业图片的内容、风格和氛围，用一句话描述，并推荐一个适合的背景模板风格"
    "（如：温馨、活泼、正式、简洁等）。只返回推荐风格，不要其他内容。"
)

DEFAULT_COMMENT_INSTRUCTION = (
    "请根据这张作业图片，生成一句合适的点评评语。评语应该：1. 简洁明了，不超过20个字；"
    "2. 积极正面，鼓励为主；3. 针对作业内容给出具体评价。只返回评语内容，不要其他说明。"
)

DEFAULT_COMMENT = "完成得很好，继续保持！"

_QUOTES = re.compile(r'^["\'“”]+|["\'“”]+$')


@dataclass
class StyleAnalysis:
    style: StyleLabel
    description: str
    raw: dict


@dataclass
class CommentOutcome:
    comment: str
    raw: dict
    fallback: bool = False


def clean_comment(text: str) -> str:
    text = _QUOTES.sub("", text.strip())
    return re.sub(r"\s*\n\s*", " ", text).strip()


def first_output_text(payload) -> str:
    """Text of the first content block of the first output item, or ''."""
    try:
        text = payload["output"][0]["content"][0].get("text") or ""
    except (KeyError, IndexError, TypeError, AttributeError):
        return ""
    return text if isinstance(text, str) else ""


def iter_output_texts(payload):
    output = payload.get("output") if isinstance(payload, dict) else None
    if not isinstance(output, list):
        return
    for item in output:
        if not isinstance(item, dict) or item.get("type") != "message":
            continue
        content = item.get("content")
        if not isinstance(content, list):
            continue
        for block in content:
            if isinstance(block, dict) and block.get("type") == "output_text" and block.get("text"):
                yield block["text"]


def analyze_style(client, image_ref, keywords=DEFAULT_STYLE_KEYWORDS) -> StyleAnalysis:
    payload = client.call(image_ref, STYLE_INSTRUCTION)
    description = first_output_text(payload).strip()
    style = classify_style(description, keywords) if description else FALLBACK_STYLE
    logger.info("AI style analysis: %s (%s)", style.value, description)
    return StyleAnalysis(style=style, description=description, raw=payload)


def generate_comment(client, image_ref, instruction=None) -> CommentOutcome:
    payload = client.call(image_ref, instruction or DEFAULT_COMMENT_INSTRUCTION)

    for text in iter_output_texts(payload):
        comment = clean_comment(text)
        if comment:
            logger.info("AI comment: %s", comment)
            return CommentOutcome(comment=comment, raw=payload)

    logger.warning("no comment text in AI response, using default comment")
    return CommentOutcome(comment=DEFAULT_COMMENT, raw=payload, fallback=True)
