"""
Error taxonomy for the Translate Gateway.

Every non-2xx response carries the same envelope (see ApiError):
- error: short category
- message: user-facing text (Portuguese)
- code: stable machine-readable identifier
- details: diagnostics, only in development mode
"""
from typing import Optional

from fastapi.responses import JSONResponse

from translate_gateway.schemas.schemas import ApiError


# Machine-readable codes
MISSING_TEXT_PARAMETER = "MISSING_TEXT_PARAMETER"
INVALID_TEXT_TYPE = "INVALID_TEXT_TYPE"
INVALID_LANGUAGE_PARAMETER = "INVALID_LANGUAGE_PARAMETER"
INVALID_REQUEST_BODY = "INVALID_REQUEST_BODY"
TRANSLATION_ERROR = "TRANSLATION_ERROR"
ENDPOINT_NOT_FOUND = "ENDPOINT_NOT_FOUND"
INTERNAL_SERVER_ERROR = "INTERNAL_SERVER_ERROR"


class ApiException(Exception):
    """Base for errors that are rendered as an ApiError response."""

    status_code = 500
    error = "Internal server error"
    code = INTERNAL_SERVER_ERROR

    def __init__(
        self,
        message: str,
        *,
        code: Optional[str] = None,
        error: Optional[str] = None,
        details: Optional[str] = None
    ):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        if error is not None:
            self.error = error
        self.details = details

    def to_api_error(self, expose_details: bool = False) -> ApiError:
        return ApiError(
            error=self.error,
            message=self.message,
            code=self.code,
            details=self.details if expose_details else None
        )


class ValidationError(ApiException):
    """Client sent a request the gateway refuses before any external call."""

    status_code = 400
    error = "Invalid parameter"

    @classmethod
    def missing_text(cls) -> "ValidationError":
        return cls(
            'O parâmetro "text" é obrigatório',
            code=MISSING_TEXT_PARAMETER,
            error="Missing required parameter"
        )

    @classmethod
    def invalid_text_type(cls) -> "ValidationError":
        return cls(
            'O parâmetro "text" deve ser uma string',
            code=INVALID_TEXT_TYPE,
            error="Invalid parameter type"
        )

    @classmethod
    def invalid_language(cls, field: str) -> "ValidationError":
        return cls(
            f'O parâmetro "{field}" deve ser um código de idioma válido',
            code=INVALID_LANGUAGE_PARAMETER,
            error="Invalid parameter type"
        )

    @classmethod
    def invalid_body(cls) -> "ValidationError":
        return cls(
            "O corpo da requisição deve ser um objeto JSON",
            code=INVALID_REQUEST_BODY,
            error="Invalid request body"
        )


class TranslationError(ApiException):
    """The external translation capability failed, timed out or answered garbage."""

    status_code = 500
    error = "Translation failed"
    code = TRANSLATION_ERROR

    def __init__(self, reason: str, *, details: Optional[str] = None):
        super().__init__(
            f"Não foi possível concluir a tradução: {reason}",
            details=details
        )
        self.reason = reason


class NotFoundError(ApiException):
    status_code = 404
    error = "Endpoint not found"
    code = ENDPOINT_NOT_FOUND

    def __init__(self, path: str, *, details: Optional[str] = None):
        super().__init__(f"O caminho {path} não existe", details=details)
        self.path = path


class InternalError(ApiException):
    status_code = 500
    error = "Internal server error"
    code = INTERNAL_SERVER_ERROR

    def __init__(self, message: str = "Ocorreu um erro interno no servidor", *, details: Optional[str] = None):
        super().__init__(message, details=details)


class StatsStoreError(Exception):
    """The statistics file could not be read (I/O error, or still unreadable after re-initialization)."""


def error_response(exc: ApiException, expose_details: bool = False) -> JSONResponse:
    """Render an ApiException as its JSON envelope."""
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_api_error(expose_details).model_dump(exclude_none=True)
    )
