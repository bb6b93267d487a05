import logging
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from classroom_portal.core.config import get_settings
from classroom_portal.database.nosql_connection import get_database
from classroom_portal.features.admin.routes import router as admin_router
from classroom_portal.features.analytics.routes import router as analytics_router
from classroom_portal.features.assignments.routes import router as assignments_router
from classroom_portal.features.auth.routes import router as auth_router
from classroom_portal.features.classes.routes import router as classes_router
from classroom_portal.features.submissions.routes import router as submissions_router

logger = logging.getLogger(__name__)

settings = get_settings()

application = FastAPI(title="Classroom Portal API")

application.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@application.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail}, headers=exc.headers)


@application.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    details = [
        {"field": ".".join(str(part) for part in error["loc"][1:]), "message": error["msg"]}
        for error in exc.errors()
    ]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Validation failed", "details": details},
    )


@application.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error"},
    )


application.include_router(auth_router, tags=["Auth"], prefix="/api/auth")
application.include_router(classes_router, tags=["Classes"], prefix="/api/classes")
application.include_router(assignments_router, tags=["Assignments"], prefix="/api")
application.include_router(submissions_router, tags=["Submissions"], prefix="/api")
application.include_router(admin_router, tags=["Admin"], prefix="/api/admin")
application.include_router(analytics_router, tags=["Analytics"], prefix="/api/analytics")


@application.get("/", tags=["Health"])
def root():
    return {"message": "Welcome to the Classroom Portal API"}


@application.get("/health", tags=["Health"])
def health():
    try:
        get_database().read()
        database = True
    except Exception:
        logger.warning("Health check could not reach the database", exc_info=True)
        database = False
    return {"status": "ok", "database": database}
