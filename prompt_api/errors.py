from typing import Optional


class PromptApiError(Exception):
    """Errore base: ogni sottoclasse conosce il proprio status HTTP e il messaggio pubblico."""

    status_code = 500
    error = "Server error"

    def __init__(self, message: Optional[str] = None, details: Optional[str] = None):
        super().__init__(message or self.error)
        self.message = message or self.error
        self.details = details

    def to_body(self) -> dict:
        body = {"error": self.message}
        if self.details:
            body["details"] = self.details
        return body


class ValidationError(PromptApiError):
    status_code = 400
    error = "Name and prompt are required"


class NotFoundError(PromptApiError):
    status_code = 404
    error = "Prompt not found"


class ConfigurationError(PromptApiError):
    status_code = 500
    error = "Missing SUPABASE_URL or SUPABASE_ANON_KEY environment variables"


class StorageError(PromptApiError):
    status_code = 500
    error = "Server error"

    def __init__(self, details: str, message: Optional[str] = None):
        super().__init__(message, details=details)
