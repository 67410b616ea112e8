# app 공통 예외 + 에러 응답 핸들러
# 라우터/서비스는 아래 예외만 던지고, JSON 에러 봉투는 핸들러가 만든다.
#   {"message": "...", "error": "..."}  (+ AI 원문 "raw")

from __future__ import annotations
import logging
from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

log = logging.getLogger(__name__)


class RecipeAPIError(Exception):
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None, error: Any = None):
        self.message = message or self.default_message
        self.error = error
        super().__init__(self.message)

    def to_body(self) -> dict:
        body: dict = {"message": self.message}
        if self.error is not None:
            body["error"] = self.error
        return body


class InvalidInput(RecipeAPIError):
    status_code = 400
    default_message = "Invalid input"


class Unauthenticated(RecipeAPIError):
    status_code = 401
    default_message = "Not authenticated"


class NotFound(RecipeAPIError):
    status_code = 404
    default_message = "Not found"


class ServiceNotConfigured(RecipeAPIError):
    # AI 키 없음: 외부 호출 전에 끊는다
    default_message = "AI service not configured"


class UpstreamError(RecipeAPIError):
    default_message = "AI service request failed"


class AIOutputInvalid(RecipeAPIError):
    default_message = "AI response JSON invalid"

    def __init__(self, raw: str, message: Optional[str] = None, error: Any = None):
        super().__init__(message, error)
        self.raw = raw

    def to_body(self) -> dict:
        body = super().to_body()
        body["raw"] = self.raw
        return body


class InternalError(RecipeAPIError):
    pass


async def _recipe_api_error(request: Request, exc: RecipeAPIError) -> JSONResponse:
    if exc.status_code >= 500:
        log.warning("%s %s -> %d %s", request.method, request.url.path, exc.status_code, exc.message)
    return JSONResponse(status_code=exc.status_code, content=jsonable_encoder(exc.to_body()))


async def _validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content=jsonable_encoder({"message": "Invalid request payload", "error": exc.errors()}),
    )


async def _unhandled_error(request: Request, exc: Exception) -> JSONResponse:
    # 최후 안전망 (라우터에서 못 잡은 것)
    log.exception("unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"message": "Internal server error", "error": str(exc)})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RecipeAPIError, _recipe_api_error)
    app.add_exception_handler(RequestValidationError, _validation_error)
    app.add_exception_handler(Exception, _unhandled_error)
