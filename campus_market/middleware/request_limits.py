from fastapi import Request
from fastapi.responses import JSONResponse

from campus_market.core.errors import PayloadTooLarge


def add_upload_limit(app, max_bytes: int):
    """
    Reject requests whose declared Content-Length exceeds `max_bytes` before
    the body is read. Chunked bodies are re-checked by the product workflow.
    """
    @app.middleware("http")
    async def upload_limit_mw(request: Request, call_next):
        declared = request.headers.get("content-length")
        if declared and declared.isdigit() and int(declared) > max_bytes:
            err = PayloadTooLarge()
            return JSONResponse(status_code=err.status_code, content={"error": err.message})
        return await call_next(request)


def add_security_headers(app):
    @app.middleware("http")
    async def security_headers_mw(request: Request, call_next):
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "no-referrer-when-downgrade"
        return response
