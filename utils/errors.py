class AppError(Exception):
    status_code = 500

    def __init__(self, message):
        super().__init__(message)
        self.message = message

    def to_dict(self):
        return {"error": self.message}


class ValidationError(AppError):
    status_code = 400


class NotFoundError(AppError):
    status_code = 404


class ImageNotFound(NotFoundError):
    # the image is referenced from the request body, so it's a bad request
    status_code = 400

    def __init__(self, path):
        super().__init__(f"Image file not found: {path}")
        self.path = path


class UploadError(AppError):
    status_code = 400

    def __init__(self, message, code=None):
        super().__init__(message)
        self.code = code

    def to_dict(self):
        body = {"error": self.message}
        if self.code:
            body["code"] = self.code
        return body


class AdapterError(AppError):
    """AI endpoint answered with a non-2xx status, malformed JSON, or not at all."""

    status_code = 500

    def __init__(self, message, status=None, body=None):
        super().__init__(message)
        self.status = status
        self.body = body

    def to_dict(self):
        return {"error": f"AI request failed: {self.message}"}


class EmptyCatalog(AppError):
    status_code = 200

    def __init__(self, message="No templates available"):
        super().__init__(message)
