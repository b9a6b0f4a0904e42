import sys

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from app.api.handlers import register_error_handlers
from app.api.routes import router
from app.config import get_settings

logger.remove()
logger.add(sys.stderr, level="INFO", format="{time:HH:mm:ss} | {level:<7} | {message}")

settings = get_settings()

app = FastAPI(title="Savings Coach", version="0.1.0")

# The chat UI calls from its own origin with the caller identity header
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["authorization", "content-type", "x-user-id"],
)
register_error_handlers(app)
app.include_router(router)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    user = request.headers.get("x-user-id", "-")
    logger.info("{} {} (user {})", request.method, request.url.path, user)
    response: Response = await call_next(request)
    logger.info("→ {} {}", request.url.path, response.status_code)
    return response


@app.on_event("startup")
async def start_bot():
    """Poll Telegram on the server's loop when a bot token is configured."""
    if not settings.telegram_bot_token:
        logger.warning("TELEGRAM_BOT_TOKEN not set — Telegram chat disabled")
        return

    from app.bot.handler import build_bot_app

    bot_app = build_bot_app()
    await bot_app.initialize()
    await bot_app.start()
    await bot_app.updater.start_polling(drop_pending_updates=True)
    app.state.bot = bot_app
    logger.info("Telegram chat enabled (polling)")


@app.on_event("shutdown")
async def stop_bot():
    bot_app = getattr(app.state, "bot", None)
    if bot_app is None:
        return
    await bot_app.updater.stop()
    await bot_app.stop()
    await bot_app.shutdown()
    logger.info("Telegram chat stopped")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=8000)
