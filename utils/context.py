from flask import current_app

# keys under app.extensions, filled by create_app()
STORE = "asset_store"
AI_CLIENT = "ai_client"
CLASSIFIER = "network_classifier"
KEYWORDS = "style_keywords"


def get_store():
    return current_app.extensions[STORE]


def get_ai_client():
    return current_app.extensions[AI_CLIENT]


def get_classifier():
    return current_app.extensions[CLASSIFIER]


def get_keywords():
    return current_app.extensions[KEYWORDS]
