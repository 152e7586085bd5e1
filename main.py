from dotenv import load_dotenv
load_dotenv()

from fastapi import FastAPI
from starlette.middleware.sessions import SessionMiddleware
import uvicorn
import logging
import os

from database import init_db
from route_modules import combined_router

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)
logger = logging.getLogger("gym_app")

SESSION_SECRET_KEY = os.getenv("SESSION_SECRET_KEY", os.getenv("SECRET_KEY", "dev_session_key_123"))

app = FastAPI(title="Prime Fit Gym Manager")
# Per-browser session storage for email/password members (signed cookie)
app.add_middleware(SessionMiddleware, secret_key=SESSION_SECRET_KEY, same_site="lax")
app.include_router(combined_router)


@app.middleware("http")
async def add_no_cache_header(request, call_next):
    response = await call_next(request)
    # Dashboard data is per-user; never let a proxy or browser reuse it
    response.headers["Cache-Control"] = "no-cache, no-store, must-revalidate, max-age=0, private"
    response.headers["Pragma"] = "no-cache"
    response.headers["Expires"] = "0"
    return response


@app.on_event("startup")
def on_startup():
    init_db()
    logger.info("Database tables ready")


@app.get("/health")
async def health():
    return {"status": "ok"}


if __name__ == "__main__":
    port = int(os.environ.get("PORT", 9007))
    uvicorn.run(app, host="0.0.0.0", port=port)
