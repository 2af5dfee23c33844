from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware import Middleware
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.v1.activity import router as activity_router
from api.v1.chat import router as chat_router
from api.v1.events import router as events_router
from api.v1.gardens import router as gardens_router
from api.v1.plants import router as plants_router
from api.v1.tasks import router as tasks_router
from api.v1.users import router as users_router
from core.config import settings
from core.exceptions import AppError, StoreError
from core.logger import app_logger
from init_db import init_db, close_db

middleware = [
    Middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
]

app = FastAPI(
    title=settings.APP_NAME,
    middleware=middleware
)


@app.on_event("startup")
async def startup():
    await init_db()
    app_logger.info(f"✅ {settings.APP_NAME} started")


@app.on_event("shutdown")
async def shutdown():
    await close_db()


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    if isinstance(exc, StoreError):
        app_logger.error(f"{request.method} {request.url.path} failed in {exc.operation}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = [
        {
            "field": ".".join(str(part) for part in err["loc"] if part != "body"),
            "message": err["msg"],
        }
        for err in exc.errors()
    ]
    return JSONResponse(status_code=400, content={"errors": errors})


@app.get("/api/health")
async def health():
    return {"status": "ok"}


app.include_router(gardens_router)
app.include_router(plants_router)
app.include_router(tasks_router)
app.include_router(events_router)
app.include_router(chat_router)
app.include_router(activity_router)
app.include_router(users_router)
