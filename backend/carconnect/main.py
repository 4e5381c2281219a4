from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, RedirectResponse
from starlette.middleware.sessions import SessionMiddleware
from .config import settings
from .auth import GuardRedirect
from .errors import CarConnectError
import logging
import time
import os
import uuid
from .routers.pages import router as pages_router
from .routers.auth import router as auth_router
from .routers.catalog import router as catalog_router
from .routers.leads import router as leads_router
from .routers.reviews import router as reviews_router
from .routers.community import router as community_router
from .routers.events import router as events_router
from .routers.site import router as site_router
from .routers.account import router as account_router
from .routers.admin import router as admin_router
from .routers.brand_admin import router as brand_admin_router


def create_app() -> FastAPI:
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    app = FastAPI(title="CarConnect", version="0.1.0")
    logger = logging.getLogger(__name__)
    app.add_middleware(SessionMiddleware, secret_key=settings.APP_SECRET)

    @app.middleware("http")
    async def timing_middleware(request: Request, call_next):
        t0 = time.perf_counter()
        req_id = uuid.uuid4().hex[:8]
        response = await call_next(request)
        total = time.perf_counter() - t0
        response.headers["X-Process-Time"] = f"{total:.3f}"
        if os.environ.get("REQ_TIMING", "0") == "1":
            logger.info(
                "req_timing id=%s path=%s status=%s total_ms=%.1f",
                req_id,
                request.url.path,
                response.status_code,
                total * 1000,
            )
        return response

    @app.exception_handler(CarConnectError)
    async def carconnect_error_handler(request: Request, exc: CarConnectError):
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(GuardRedirect)
    async def guard_redirect_handler(request: Request, exc: GuardRedirect):
        request.session["flash"] = exc.notice
        return RedirectResponse(url=exc.url, status_code=302)

    app.include_router(pages_router)
    app.include_router(auth_router)
    app.include_router(catalog_router)
    app.include_router(leads_router)
    app.include_router(reviews_router)
    app.include_router(community_router)
    app.include_router(events_router)
    app.include_router(site_router)
    app.include_router(account_router)
    app.include_router(admin_router)
    app.include_router(brand_admin_router)

    @app.get("/health", include_in_schema=False)
    def healthcheck():
        return {"status": "ok"}

    return app


app = create_app()
