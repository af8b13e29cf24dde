from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import RedirectResponse
from fastapi.staticfiles import StaticFiles
from starlette.middleware.sessions import SessionMiddleware

from auth import dependencies as auth_dependencies
from auth import router as auth_router
from core import db, settings
from core.logging_config import setup_logging
from core.templating import STATIC_DIR
from reports import router as reports_router
from sync import router as sync_router

setup_logging()


@asynccontextmanager
async def lifespan(_: FastAPI):
    # Initialize the DB pool once per process.
    await db.init_pool()
    try:
        yield
    finally:
        await db.close_pool()


app = FastAPI(lifespan=lifespan)

# Cookie-backed sessions; the cookie is re-issued on each response, so
# max_age acts as an idle timeout.
app.add_middleware(
    SessionMiddleware,
    secret_key=settings.session_secret(),
    session_cookie=settings.SESSION_COOKIE_NAME,
    max_age=settings.session_max_age_s(),
    same_site="lax",
    https_only=settings.session_https_only(),
)


@app.middleware("http")
async def disable_caching(request: Request, call_next):
    # Keeps protected pages out of the browser cache after logout.
    response = await call_next(request)
    response.headers["Cache-Control"] = "no-store, no-cache, must-revalidate, private"
    return response


@app.exception_handler(auth_dependencies.NotAuthenticated)
async def redirect_to_signin(_: Request, __: auth_dependencies.NotAuthenticated):
    return RedirectResponse("/signin", status_code=303)


app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")

app.include_router(auth_router.router, tags=["auth"])
app.include_router(sync_router.router, tags=["sync"])
app.include_router(reports_router.router, tags=["reports"])


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


@app.get("/")
def root():
    return RedirectResponse("/signin")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.api_host(), port=settings.api_port())
