from flask import Blueprint, jsonify

from services.asset_service import PRESET_COMMENTS

comment_bp = Blueprint("comment", __name__, url_prefix="/api/comments")


@comment_bp.get("")
def get_comments():
    return jsonify({"comments": PRESET_COMMENTS})
