import os
from dotenv import load_dotenv
load_dotenv()


def _int_env(name, default):
    return int(os.environ.get(name, default))


def _float_env(name, default):
    return float(os.environ.get(name, default))


HOST = os.environ.get("HOST", "0.0.0.0")
PORT = _int_env("PORT", 5001)
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
# honour X-Forwarded-Proto/Host when running behind a reverse proxy
TRUST_PROXY = os.environ.get("TRUST_PROXY", "0") == "1"

CORS_ORIGINS = [
    o.strip()
    for o in os.environ.get("CORS_ORIGINS", "http://localhost:5173,http://localhost:5174").split(",")
    if o.strip()
]

# --- storage ---
STORAGE_BACKEND = os.environ.get("STORAGE_BACKEND", "local")   # local | s3
# assets live in their own data directory, never alongside the code and .env
STORAGE_ROOT = os.environ.get(
    "STORAGE_ROOT", os.path.join(os.path.dirname(os.path.abspath(__file__)), "data")
)
S3_BUCKET = os.environ.get("S3_BUCKET")
S3_PREFIX = os.environ.get("S3_PREFIX", "")
AWS_REGION = os.environ.get("AWS_REGION", "us-east-1")

UPLOAD_DIR = "uploads"
GENERATED_DIR = "generated"
BASE_TEMPLATE_DIR = "templates/base"
USER_TEMPLATE_DIR = "templates/user"
FONT_DIR = "fonts"
EMOJI_DIR = "emojis"
ASSET_DIRS = [UPLOAD_DIR, GENERATED_DIR, BASE_TEMPLATE_DIR, USER_TEMPLATE_DIR, FONT_DIR, EMOJI_DIR]
# directories whose files may be sent to the AI endpoint
IMAGE_DIRS = [UPLOAD_DIR, GENERATED_DIR, BASE_TEMPLATE_DIR, USER_TEMPLATE_DIR, EMOJI_DIR]

# --- AI endpoint ---
AI_API_URL = os.environ.get("AI_API_URL", "https://ark.cn-beijing.volces.com/api/v3/responses")
AI_API_KEY = os.environ.get("AI_API_KEY")
AI_MODEL = os.environ.get("AI_MODEL", "doubao-seed-1-8-251228")
AI_TIMEOUT = _float_env("AI_TIMEOUT", 60)

# --- limits ---
BATCH_DELAY_SECONDS = _float_env("BATCH_DELAY_SECONDS", 0.5)
MAX_BATCH_FILES = _int_env("MAX_BATCH_FILES", 50)
MAX_IMAGE_MB = _int_env("MAX_IMAGE_MB", 50)
MAX_EMOJI_MB = _int_env("MAX_EMOJI_MB", 10)


def as_dict():
    """Settings copied into ``app.config`` by ``create_app``."""
    return {
        "HOST": HOST,
        "PORT": PORT,
        "LOG_LEVEL": LOG_LEVEL,
        "TRUST_PROXY": TRUST_PROXY,
        "CORS_ORIGINS": CORS_ORIGINS,
        "STORAGE_BACKEND": STORAGE_BACKEND,
        "STORAGE_ROOT": STORAGE_ROOT,
        "S3_BUCKET": S3_BUCKET,
        "S3_PREFIX": S3_PREFIX,
        "AWS_REGION": AWS_REGION,
        "AI_API_URL": AI_API_URL,
        "AI_API_KEY": AI_API_KEY,
        "AI_MODEL": AI_MODEL,
        "AI_TIMEOUT": AI_TIMEOUT,
        "BATCH_DELAY_SECONDS": BATCH_DELAY_SECONDS,
        "MAX_BATCH_FILES": MAX_BATCH_FILES,
        "MAX_IMAGE_MB": MAX_IMAGE_MB,
        "MAX_EMOJI_MB": MAX_EMOJI_MB,
    }
