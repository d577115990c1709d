import logging

import requests

from utils.errors import AdapterError

logger = logging.getLogger(__name__)


class ArkClient:
    """Multimodal "responses" endpoint: one image plus one instruction per call."""

    def __init__(self, api_url, api_key, model, timeout=60, session=None):
        self.api_url = api_url
        self.api_key = api_key
        self.model = model
        self.timeout = timeout
        self.session = session or requests.Session()

    def build_body(self, image_ref, instruction):
        return {
            "model": self.model,
            "input": [
                {
                    "role": "user",
                    "content": [
                        {"type": "input_image", "image_url": image_ref},
                        {"type": "input_text", "text": instruction},
                    ],
                }
            ],
        }

    def call(self, image_ref, instruction):
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        logger.info("AI request, model=%s image=%s", self.model, image_ref[:100])
        logger.debug("AI instruction: %s", instruction)

        try:
            res = self.session.post(
                self.api_url,
                headers=headers,
                json=self.build_body(image_ref, instruction),
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error("AI request error: %s", e)
            raise AdapterError(f"network error: {e}") from e

        if not res.ok:
            logger.error("AI error response: %s %s", res.status_code, res.text)
            raise AdapterError(
                f"{res.status_code} {res.reason}", status=res.status_code, body=res.text
            )

        try:
            return res.json()
        except ValueError as e:
            logger.error("AI response is not JSON: %s", res.text[:500])
            raise AdapterError(
                "malformed response payload", status=res.status_code, body=res.text
            ) from e


def create_client(config):
    return ArkClient(
        config["AI_API_URL"],
        config.get("AI_API_KEY"),
        config["AI_MODEL"],
        timeout=config.get("AI_TIMEOUT", 60),
    )
