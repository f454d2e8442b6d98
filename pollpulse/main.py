from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from pollpulse.config.common_settings import AppSettings
from pollpulse.context import AppContext, build_app_context
from pollpulse.exceptions import PollPulseError
from pollpulse.routers.polls_router import router as polls_router
from pollpulse.utils.logger import logger
from pollpulse.utils.startup_validation import validate_startup


def create_app(context: Optional[AppContext] = None, settings: Optional[AppSettings] = None) -> FastAPI:
    """
    Create the PollPulse API.

    Args:
        context: Prebuilt application context; when omitted it is built on startup
        settings: Settings used for CORS and for building the context
    """
    settings = settings or (context.settings if context else AppSettings())
    app = FastAPI(title="PollPulse", version="0.1.0")

    if context is not None:
        app.state.context = context

    logger.info(f"Allowed origins: {settings.allowed_origins}")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "PUT", "POST", "OPTIONS"],
        allow_headers=["*"],
    )

    @app.exception_handler(PollPulseError)
    async def pollpulse_error_handler(request: Request, exc: PollPulseError) -> JSONResponse:
        if exc.code >= 500:
            logger.error(f"[API] {request.method} {request.url.path} failed: {exc.message}")
        return JSONResponse(status_code=exc.code, content=exc.to_dict())

    @app.get("/healthz")
    def healthz() -> dict:
        """Health check with data source status."""
        health_status = {"status": "ok"}
        ctx = getattr(app.state, "context", None)
        if ctx is None:
            health_status["status"] = "starting"
            return health_status

        health_status["chain_id"] = ctx.settings.chain_id
        health_status["network"] = ctx.network_config.get_network_name(ctx.settings.chain_id)
        health_status.update(ctx.gateway.to_dict())
        return health_status

    @app.on_event("startup")
    async def startup_event():
        """Build the application context on startup."""
        logger.info("Starting PollPulse API...")
        if getattr(app.state, "context", None) is not None:
            return
        if not validate_startup(settings):
            logger.error("Startup validation failed. Please check configuration.")
        app.state.context = build_app_context(settings)
        logger.info("✅ Application context initialized")

    @app.on_event("shutdown")
    async def shutdown_event():
        """Close subgraph clients on shutdown."""
        logger.info("Shutting down PollPulse API...")
        ctx = getattr(app.state, "context", None)
        if ctx is not None:
            await ctx.close()

    app.include_router(polls_router)
    return app


app = create_app()


if __name__ == "__main__":
    import os

    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=int(os.getenv("PORT", 8000)))
