import logging

from fastapi import FastAPI

from groupcal.api.events import router as events_router
from groupcal.core.config import settings
from groupcal.core.log_context import ContextFormatter

handler = logging.StreamHandler()
handler.setFormatter(ContextFormatter("%(levelname)s:%(name)s:%(message)s"))

root = logging.getLogger()
root.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
root.handlers.clear()
root.addHandler(handler)

app = FastAPI(title="Group Availability Calendar", version="0.1.0")

app.include_router(events_router, tags=["events"])


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
