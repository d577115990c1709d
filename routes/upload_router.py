from flask import Blueprint, request, jsonify, current_app

from services.upload_service import NO_FILE, save_image, save_images
from utils.context import get_store
from utils.errors import UploadError, ValidationError

upload_bp = Blueprint("upload", __name__, url_prefix="/api")


@upload_bp.post("/upload")
def upload():
    info = save_image(get_store(), request.files.get("image"), current_app.config["MAX_IMAGE_MB"])
    return jsonify({
        "success": True,
        "filename": info["filename"],
        "path": info["path"],
        "size": info["size"],
    })


@upload_bp.post("/upload/batch")
def upload_batch():
    saved = save_images(
        get_store(),
        request.files.getlist("images"),
        current_app.config["MAX_IMAGE_MB"],
        current_app.config["MAX_BATCH_FILES"],
    )
    files = [
        {"filename": s["filename"], "originalname": s["originalname"], "path": s["path"]}
        for s in saved
    ]
    return jsonify({"success": True, "files": files})


# edited canvas export; stored as a new upload, never overwriting the source
@upload_bp.post("/save-image")
def save_edited_image():
    file = request.files.get("image")
    if file is None or not file.filename:
        raise UploadError("No file uploaded", code=NO_FILE)
    if not request.form.get("filename"):
        raise ValidationError("Missing filename parameter")

    info = save_image(get_store(), file, current_app.config["MAX_IMAGE_MB"])
    return jsonify({
        "success": True,
        "filename": info["filename"],
        "path": info["path"],
        "message": "Image saved",
    })
