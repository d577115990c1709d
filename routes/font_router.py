# routes/font_router.py
from flask import Blueprint, jsonify

from services.asset_service import list_fonts
from utils.context import get_store

font_bp = Blueprint("font", __name__, url_prefix="/api/fonts")


# GET /api/fonts - bundled fonts, system default first
@font_bp.get("")
def get_fonts():
    return jsonify({"success": True, "fonts": list_fonts(get_store())})
