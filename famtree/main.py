from __future__ import annotations

import logging
import os

from fastapi import FastAPI

try:
    from .routes.people import router as people_router
    from .routes.tree import router as tree_router
except ImportError:  # pragma: no cover
    # Support running with CWD=famtree (e.g., `python -m uvicorn main:app`).
    from routes.people import router as people_router
    from routes.tree import router as tree_router


def _configure_logging() -> None:
    level = os.environ.get("FAMTREE_LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


_configure_logging()

app = FastAPI(title="Family Tree API", version="0.1.0")

app.include_router(people_router)
app.include_router(tree_router)


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
