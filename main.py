import logging
import os

from fastapi import Depends, FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException
from sqlalchemy.orm import Session
from dotenv import load_dotenv
import uvicorn

from database import check_connection, get_session
from routers import customers_router, invoices_router, payments_router, settings_router

# Load .env
load_dotenv()

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# App instance
app = FastAPI(
    title="Gems Billing API",
    description="Jewelry invoicing with GST, making charges and compound interest on overdue balances.",
    version="1.0.0",
)

# CORS
origins = [origin for origin in os.getenv("CORS_ORIGINS", "").split(",") if origin]
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(customers_router)
app.include_router(invoices_router)
app.include_router(payments_router)
app.include_router(settings_router)


@app.get("/", tags=["Health Check"])
def read_root(db: Session = Depends(get_session)):
    if not check_connection(db):
        return JSONResponse(
            status_code=503,
            content={"status": "degraded", "message": "Gems Billing API", "database": "unavailable"},
        )
    return {"status": "ok", "message": "Gems Billing API", "database": "ok"}


# 404 fallback for unknown routes; 404s raised by endpoints keep their detail
@app.exception_handler(StarletteHTTPException)
async def not_found_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 404 and exc.detail == "Not Found":
        return JSONResponse(status_code=404, content={"error": "Route not found"})
    return await http_exception_handler(request, exc)


@app.middleware("http")
async def internal_error_middleware(request: Request, call_next):
    try:
        return await call_next(request)
    except Exception:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"error": "Internal server error"})


if __name__ == "__main__":
    from database import init_db

    init_db()
    port = int(os.getenv("PORT", 10000))
    uvicorn.run("main:app", host="0.0.0.0", port=port, reload=True)
