# Middleware package init
"""
Atomsmiths Backend — Middleware Package
========================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain:
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    1. Request ID: Generate correlation ID for logging and error bodies
    2. Logging: Log request details with the generated request ID
    3. GZip: Compress responses over 500 bytes (member and blog listings)
    4. CORS: Applied by FastAPI's CORSMiddleware (answers preflight OPTIONS)

    The order is reversed for responses, so the request ID header is set on
    every response and logging sees the final status code.
"""
