import logging

from flask import Blueprint, request, jsonify, current_app

from services.ai_service import analyze_style, generate_comment
from services.asset_service import all_templates
from services.comment_service import generate_batch, validate_batch
from services.image_encoder import encode
from services.template_service import recommend
from utils.context import get_ai_client, get_classifier, get_keywords, get_store
from utils.errors import EmptyCatalog, ValidationError

logger = logging.getLogger(__name__)

ai_bp = Blueprint("ai", __name__, url_prefix="/api/ai")


def _encode_for_request(image_url):
    return encode(get_store(), image_url, request.scheme, request.host, get_classifier())


def _json_body():
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def _require_image_url(data):
    image_url = data.get("imageUrl")
    if not image_url or not isinstance(image_url, str):
        raise ValidationError("Missing image URL")
    return image_url


@ai_bp.post("/match-template")
def match_template():
    data = _json_body()
    image_ref = _encode_for_request(_require_image_url(data))

    keywords = get_keywords()
    analysis = analyze_style(get_ai_client(), image_ref.value, keywords)

    templates = all_templates(get_store())
    logger.info("found %d templates", len(templates))
    try:
        template = recommend(templates, analysis.style, analysis.description, keywords)
    except EmptyCatalog as e:
        return jsonify({
            "success": True,
            "style": analysis.style.value,
            "styleDescription": analysis.description,
            "recommendedTemplate": None,
            "message": e.message,
        })

    logger.info("recommended template: %s", template.name)
    return jsonify({
        "success": True,
        "style": analysis.style.value,
        "styleDescription": analysis.description,
        "recommendedTemplate": template.to_dict(),
        "aiResponse": analysis.raw,
    })


@ai_bp.post("/generate-comment")
def generate_single_comment():
    data = _json_body()
    image_ref = _encode_for_request(_require_image_url(data))

    outcome = generate_comment(get_ai_client(), image_ref.value, data.get("prompt"))
    return jsonify({
        "success": True,
        "comment": outcome.comment,
        "rawResponse": outcome.raw,
    })


@ai_bp.post("/generate-comments-batch")
def generate_comments_batch():
    data = _json_body()
    files = data.get("files")
    validate_batch(files, current_app.config["MAX_BATCH_FILES"])

    results = generate_batch(
        files,
        data.get("prompt"),
        get_ai_client(),
        _encode_for_request,
        delay=current_app.config["BATCH_DELAY_SECONDS"],
    )
    return jsonify({"success": True, "results": [r.to_dict() for r in results]})
