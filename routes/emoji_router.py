from flask import Blueprint, request, jsonify, current_app

from services.asset_service import delete_emoji, list_emojis
from services.upload_service import save_emoji
from utils.context import get_store

emoji_bp = Blueprint("emoji", __name__, url_prefix="/api/emojis")


@emoji_bp.get("")
def get_emojis():
    return jsonify({"success": True, "emojis": list_emojis(get_store())})


@emoji_bp.post("/upload")
def upload_emoji():
    info = save_emoji(get_store(), request.files.get("emoji"), current_app.config["MAX_EMOJI_MB"])
    return jsonify({"success": True, **info})


@emoji_bp.delete("/<filename>")
def remove_emoji(filename):
    delete_emoji(get_store(), filename)
    return jsonify({"success": True})
