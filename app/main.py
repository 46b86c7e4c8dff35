# app/main.py
from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api import routers
from app.core.config import get_settings
from app.core.errors import StagingError
from app.core.logging import configure_logging

# === إعدادات وتسجيل ===
settings = get_settings()
logger = configure_logging()

app = FastAPI(title=settings.app_name, version=settings.app_version)


# === CORS ===
allow_origins = list(settings.allow_origins) or ["*"]
allow_credentials = settings.allow_credentials

# ملاحظة أمنية: لا يجوز الجمع بين allow_credentials=True و allow_origins=["*"].
if allow_credentials and "*" in allow_origins:
    logger.warning("تم تعطيل allow_credentials لأن allow_origins تحتوي على '*'")
    allow_credentials = False

app.add_middleware(
    CORSMiddleware,
    allow_origins=allow_origins,
    allow_credentials=allow_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Content-Disposition"],  # لقراءة اسم الملف الناتج من الهيدر
)


# === أخطاء قابلة للاسترداد تُعرض كإشعار واحد ===
@app.exception_handler(StagingError)
async def staging_error_handler(request: Request, exc: StagingError) -> JSONResponse:
    logger.warning("%s: %s (%s)", exc.kind, exc.description, request.url.path)
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "status": "error",
            "kind": exc.kind,
            "notification": exc.to_notification(),
        },
    )


# === Routers ===
for router in routers:
    app.include_router(router)


# === Basic endpoints ===
@app.get("/")
async def root() -> dict:
    logger.debug("Root endpoint accessed")
    return {"message": f"Welcome to {settings.app_name}"}


@app.get("/health")
async def health_check() -> dict:
    logger.debug("Health check invoked")
    return {"status": "ok", "message": "PDF Merge API is running"}
