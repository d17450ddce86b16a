import logging
import os
from typing import Optional

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from app.config import listings_csv_path, static_dir
from core.listing_store import ListingStore, load_listings
from server.api import router as chat_router

logger = logging.getLogger("uvicorn.error")
load_dotenv()


def create_app(store: Optional[ListingStore] = None, static_path: Optional[str] = None) -> FastAPI:
    """
    Build the app. The listings CSV is loaded here, once, before any request
    is served; pass `store` to skip the disk read.
    """
    app = FastAPI(title="Realtor GPT", description="Chat over an MLS listings CSV")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.store = store if store is not None else load_listings(listings_csv_path())

    @app.get("/health", tags=["system"])
    async def health_check() -> dict:
        return {"status": "ok", "listings": len(app.state.store)}

    app.include_router(chat_router)

    # Static UI last so it doesn't shadow the API routes.
    frontend = static_path or static_dir()
    if os.path.isdir(frontend):
        app.mount("/", StaticFiles(directory=frontend, html=True), name="frontend")
    else:
        logger.warning("Static directory %s not found; UI will not be served", frontend)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=int(os.getenv("PORT", "8000")), reload=False)
