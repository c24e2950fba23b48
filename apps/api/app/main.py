from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import get_cors_allow_origins
from app.routers import storage_router

app = FastAPI(
    title="S3 Direct Upload API",
    description="Signed POST policies for browser → S3 uploads",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_cors_allow_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(storage_router)


@app.get("/health")
async def health_check():
    return {"status": "ok", "service": "s3-direct-upload-api"}
