import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI

from api.routes import router
from chat.conversation import load_chat_config
from storage.client import get_store


logging.basicConfig(
    level=os.environ.get("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    config = load_chat_config()
    app.state.chat_config = config
    app.state.store = get_store(owner_id=config["storage"]["owner_id"])
    if not os.environ.get("ANTHROPIC_API_KEY"):
        logger.warning("ANTHROPIC_API_KEY not set; /api/chat will refuse requests")
    yield
    if app.state.store is not None:
        await app.state.store.aclose()


app = FastAPI(lifespan=lifespan)

app.include_router(router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=int(os.environ.get("PORT", "3000")),
    )
