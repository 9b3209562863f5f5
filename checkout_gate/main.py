from fastapi import FastAPI
from fastapi import Request
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from checkout_gate.api.routes import router
from checkout_gate.api.admin_routes import router as admin_router
from checkout_gate.attributes.store import probe_capability
from checkout_gate.observability.logging import log
from checkout_gate.settings import settings

app = FastAPI(title="Checkout Contact Gate API")

# The checkout block runs in the buyer's browser, so cross-origin calls are expected.
origins = [x.strip() for x in settings.CORS_ORIGINS.split(",") if x.strip()]
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(router)
app.include_router(admin_router)

# Capability probe: evaluated once per process
app.state.can_update_attributes = probe_capability()


@app.get("/")
def root():
    return {
        "status": "ok",
        "message": "Checkout contact gate is running. Use /health and /api/checkout/{sessionId}.",
        "canUpdateAttributes": bool(app.state.can_update_attributes),
    }


@app.get("/health")
def health():
    return {"status": "ok"}


@app.exception_handler(Exception)
async def universal_exception_handler(request: Request, exc: Exception):
    log(event="unhandled_exception", path=request.url.path, errorType=type(exc).__name__, error=str(exc)[:500])
    return JSONResponse(status_code=500, content={"status": "error", "detail": "internal error"})
