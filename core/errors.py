"""Error taxonomy shared by the moderation core and the HTTP layer."""


class GameForgeError(Exception):
    """Base error carrying a stable code and the HTTP status it maps to."""

    code = "INTERNAL_ERROR"
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict[str, dict[str, str]]:
        return {"error": {"code": self.code, "message": self.message}}


class Unauthorized(GameForgeError):
    code = "UNAUTHORIZED"
    status_code = 403
    default_message = "Admin access required"


class NotFound(GameForgeError):
    code = "NOT_FOUND"
    status_code = 404
    default_message = "Not found"


class ValidationFailed(GameForgeError):
    """Malformed input, detected before any write."""

    code = "VALIDATION_ERROR"
    status_code = 400
    default_message = "Invalid input"


class InvalidAction(ValidationFailed):
    code = "INVALID_ACTION"
    default_message = "Invalid moderation action"


class InvalidType(ValidationFailed):
    code = "INVALID_TYPE"
    default_message = "Invalid sanction type"


class InvalidDuration(ValidationFailed):
    code = "INVALID_DURATION"
    default_message = "Invalid duration for temporary ban"


class InvalidContentType(ValidationFailed):
    code = "INVALID_CONTENT_TYPE"
    default_message = "Invalid content type"


class InvalidRole(ValidationFailed):
    code = "INVALID_ROLE"
    default_message = "Invalid role specified"


class InvalidDomain(ValidationFailed):
    code = "INVALID_DOMAIN"
    default_message = "Invalid domain specified"


class InvalidXp(ValidationFailed):
    code = "INVALID_XP"
    default_message = "XP must be a non-negative number"


class NoUpdates(ValidationFailed):
    code = "NO_UPDATES"
    default_message = "No valid updates provided"


class MissingReason(ValidationFailed):
    code = "MISSING_REASON"
    default_message = "Reason is required"


class SelfSanction(ValidationFailed):
    code = "SELF_SANCTION"
    default_message = "Cannot sanction yourself"


class SelfDemotion(ValidationFailed):
    code = "SELF_DEMOTION"
    default_message = "Cannot change your own admin role"


class InternalError(GameForgeError):
    pass
