"""FastAPI server exposing the storefront content, catalogue, quote and advisor endpoints."""

import logging
from functools import lru_cache
from typing import Any, List, Optional

from fastapi import Body, FastAPI, Header, HTTPException, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from logic.validation import (
    AddQuoteItemRequest,
    AdvisorRequest,
    LoginRequest,
    QuoteSubmission,
    SessionQuoteSubmission,
    SizeQuantityUpdate,
    validation_failure,
)
from site_app.app import StorefrontApp
from site_app.logging_config import correlation_context, get_logger, log_event
from tools.content_store import CREDENTIAL_KEY, is_authorised, verify_credentials
from tools.product_advisor import AdvisorError, AdvisorTimeoutError
from tools.quote_sheet import QuoteSubmissionError

LOGGER = get_logger(__name__)
CACHE_CONTROL = "s-maxage=60, stale-while-revalidate=300"


def _bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization or not authorization.startswith("Bearer "):
        return None
    return authorization[len("Bearer "):]


def create_app(storefront: StorefrontApp | None = None) -> FastAPI:
    """Build the ASGI app around a storefront instance (a default one from the environment)."""

    storefront = storefront or StorefrontApp()
    app = FastAPI(title="Level Customs Storefront", version="0.1.0")
    app.state.storefront = storefront

    @app.middleware("http")
    async def correlation_middleware(request: Request, call_next):
        with correlation_context(request.headers.get("x-correlation-id")) as correlation_id:
            response = await call_next(request)
            response.headers["x-correlation-id"] = correlation_id
            return response

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        body = exc.detail if isinstance(exc.detail, dict) else {"message": str(exc.detail)}
        return JSONResponse(status_code=exc.status_code, content=body, headers=exc.headers)

    @app.exception_handler(RequestValidationError)
    async def request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(status_code=422, content=validation_failure("Invalid request", exc))

    def require_admin(authorization: Optional[str]) -> None:
        if not is_authorised(storefront.content_store, _bearer_token(authorization)):
            raise HTTPException(status_code=401, detail="Unauthorized")

    def require_session(session_id: str) -> None:
        if not storefront.quote_sessions.store.session_exists(session_id):
            raise HTTPException(status_code=404, detail=f"Unknown quote session: {session_id}")

    @app.get("/healthz")
    async def healthcheck() -> dict:
        """Lightweight readiness probe."""

        return {
            "status": "ok",
            "service": "storefront",
            "environment": storefront.config.environment or "local",
        }

    @app.get("/api/data/{key}")
    def read_content(key: str) -> JSONResponse:
        value = None
        if key != CREDENTIAL_KEY:
            try:
                value = storefront.content_store.get(key)
            except ValueError:
                pass
        if value is None:
            raise HTTPException(status_code=404, detail=f"No data found for key: {key}")
        return JSONResponse(content=value, headers={"Cache-Control": CACHE_CONTROL})

    @app.post("/api/data/{key}")
    def write_content(
        key: str,
        payload: Any = Body(default=None),
        authorization: Optional[str] = Header(default=None),
    ) -> dict:
        require_admin(authorization)
        try:
            storefront.content_store.put(key, payload)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        log_event(LOGGER, logging.INFO, "content_updated", key=key)
        return {"success": True, "message": f"Data for key '{key}' updated."}

    @app.post("/api/admin/login")
    def login(request: LoginRequest) -> JSONResponse:
        try:
            valid = verify_credentials(storefront.content_store, request.username, request.password)
        except LookupError as exc:
            log_event(LOGGER, logging.ERROR, "admin_credential_missing")
            raise HTTPException(status_code=500, detail="Server configuration error.") from exc
        if not valid:
            log_event(LOGGER, logging.WARNING, "admin_login_rejected")
            return JSONResponse(status_code=401, content={"success": False, "message": "Invalid credentials"})
        return JSONResponse(content={"success": True})

    @app.post("/api/admin/seed")
    def seed(authorization: Optional[str] = Header(default=None)) -> dict:
        if storefront.content_store.get(CREDENTIAL_KEY):
            require_admin(authorization)
        written = storefront.seed_content()
        return {"success": True, "message": "Database seeded successfully.", "keys": written}

    @app.get("/api/catalogue")
    def browse_catalogue(
        group: Optional[str] = None,
        category: List[str] = Query(default=[]),
        gender: List[str] = Query(default=[]),
        bestsellers: bool = False,
        sort: str = "default",
    ):
        try:
            return storefront.catalogue.browse(
                group=group or None,
                category=category,
                gender=gender,
                bestsellers_only=bestsellers,
                sort=sort,
            )
        except ValidationError as exc:
            return JSONResponse(status_code=422, content=validation_failure("Invalid catalogue query", exc))

    @app.post("/api/quote-sessions")
    def create_quote_session() -> dict:
        return {"session_id": storefront.quote_sessions.start_session()}

    @app.get("/api/quote-sessions/{session_id}")
    def read_quote_session(session_id: str) -> dict:
        require_session(session_id)
        return storefront.quote_session_view(session_id)

    @app.post("/api/quote-sessions/{session_id}/items")
    def add_quote_item(session_id: str, request: AddQuoteItemRequest) -> dict:
        require_session(session_id)
        try:
            storefront.add_to_quote(session_id, request.model_dump())
        except LookupError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        except (TypeError, ValueError) as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        return storefront.quote_session_view(session_id)

    @app.put("/api/quote-sessions/{session_id}/items/{item_id}/sizes/{size}")
    def update_quote_size(session_id: str, item_id: str, size: str, request: SizeQuantityUpdate) -> dict:
        require_session(session_id)
        try:
            storefront.quote_sessions.update_size_quantity(session_id, item_id, size, request.quantity)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        return storefront.quote_session_view(session_id)

    @app.delete("/api/quote-sessions/{session_id}/items/{item_id}")
    def remove_quote_item(session_id: str, item_id: str) -> dict:
        require_session(session_id)
        storefront.quote_sessions.remove_item(session_id, item_id)
        return storefront.quote_session_view(session_id)

    @app.post("/api/quote-sessions/{session_id}/submit")
    def submit_quote_session(session_id: str, request: SessionQuoteSubmission) -> dict:
        require_session(session_id)
        try:
            quote_id = storefront.submit_session_quote(session_id, request.contact.model_dump())
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        except QuoteSubmissionError as exc:
            raise HTTPException(status_code=502, detail=str(exc)) from exc
        return {"success": True, "quote_id": quote_id}

    @app.post("/api/quotes")
    def submit_quote(request: QuoteSubmission) -> dict:
        items = [item.model_dump(exclude_none=True) for item in request.items]
        try:
            storefront.submit_quote(request.contact.model_dump(), items)
        except QuoteSubmissionError as exc:
            raise HTTPException(status_code=502, detail=str(exc)) from exc
        return {"success": True}

    @app.post("/api/gemini")
    def advise(payload: Any = Body(default=None)):
        try:
            request = AdvisorRequest.model_validate(payload)
        except ValidationError as exc:
            return JSONResponse(
                status_code=400,
                content=validation_failure("Invalid request body. 'history' must be a non-empty array.", exc),
            )
        try:
            reply = storefront.advise(
                [message.model_dump() for message in request.history],
                request.products,
            )
        except AdvisorTimeoutError as exc:
            raise HTTPException(status_code=504, detail=str(exc)) from exc
        except AdvisorError as exc:
            raise HTTPException(status_code=500, detail="Failed to get response from AI.") from exc
        return {"reply": reply}

    return app


@lru_cache(maxsize=1)
def get_app() -> FastAPI:
    """Expose the FastAPI instance for ASGI servers."""

    return create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("server.api:get_app", factory=True, host="0.0.0.0", port=8080, reload=False)
