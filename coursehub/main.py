import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from coursehub.config import CORS_ORIGINS, VERSION, PORT, LOG_LEVEL
from coursehub.database import create_indexes, get_db_instance
from coursehub.auth.auth_router import router as auth_router
from coursehub.users.user_router import router as user_router
from coursehub.courses.course_router import router as course_router
from coursehub.courses.enrollment_router import router as enrollment_router
from coursehub.certificates.certificate_router import router as certificate_router
from coursehub.admin.admin_router import router as admin_router

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    await create_indexes(get_db_instance())
    yield


app = FastAPI(title="CourseHub API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"❌ Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


# ==================== ROUTER REGISTRATION ====================
app.include_router(auth_router)
app.include_router(course_router)
app.include_router(enrollment_router)
app.include_router(user_router)
app.include_router(certificate_router)
app.include_router(admin_router)
# ============================================================


@app.get("/")
def root():
    return {"name": "CourseHub API", "status": "ok"}


@app.get("/health")
def health():
    return {"status": "ok"}


@app.get("/version")
def get_version():
    return {"version": VERSION or "unknown", "status": "stable"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=PORT)
