from flask import Blueprint, request, jsonify, current_app

from services.asset_service import delete_user_template, list_templates
from services.upload_service import save_template
from utils.context import get_store

template_bp = Blueprint("template", __name__, url_prefix="/api/templates")


@template_bp.get("")
def get_templates():
    groups = list_templates(get_store())
    return jsonify({
        "success": True,
        "base": [t.to_dict() for t in groups["base"]],
        "user": [t.to_dict() for t in groups["user"]],
    })


@template_bp.post("/upload")
def upload_template():
    file = request.files.get("template")
    info = save_template(get_store(), file, current_app.config["MAX_IMAGE_MB"])
    return jsonify({
        "success": True,
        "filename": info["filename"],
        "path": info["path"],
        "name": info["originalname"],
    })


@template_bp.delete("/user/<filename>")
def remove_template(filename):
    delete_user_template(get_store(), filename)
    return jsonify({"success": True})
