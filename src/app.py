"""POS FastAPI application.

Serves the counter, kitchen display, floor view and order history
terminals. Each request is wrapped in the ``pos`` domain context.

Usage:
    uvicorn src.app:app --host 0.0.0.0 --port 8000 --reload
"""

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# The domain is initialized at module level so uvicorn workers share it.
# PROTEAN_ENV controls which config overlay is applied.
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pos.domain import pos  # noqa: E402
from pos.utils.logging import bind_terminal, clear_context, configure_logging

configure_logging()
pos.init()

# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="POS API",
    description="Restaurant point of sale — orders, kitchen queue and tables",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the ``pos`` domain context for each request.

    Terminals identify themselves with ``X-Terminal-Id``; the id is bound to
    every log line written while the request is handled.
    """
    bind_terminal(request.headers.get("X-Terminal-Id", "unknown"), path=request.url.path)
    try:
        with pos.domain_context():
            response = await call_next(request)
    finally:
        clear_context()
    return response


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from pos.api.routes import kitchen_router, order_router, table_router  # noqa: E402

app.include_router(order_router)
app.include_router(kitchen_router)
app.include_router(table_router)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(content={"status": "ok", "domain": pos.name})
