from fastapi import FastAPI, Query, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError
import json
import logging

import config
from cache import KeyedAsyncCache
from catalog import TimelineCatalog
from aggregator import count_artists
from models import EraResponse, ThumbnailResponse
from thumbnails import ThumbnailResolver
from wiki_client import WikipediaClient


logging.basicConfig(level=config.LOG_LEVEL)
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(title="Art History Timeline")

# Initialize components
catalog = TimelineCatalog()
wiki_client = WikipediaClient()
thumbnail_cache = KeyedAsyncCache()
thumbnail_resolver = ThumbnailResolver(wiki_client, thumbnail_cache)


@app.on_event("startup")
async def startup_event():
    """Load the timeline document on startup"""
    try:
        catalog.load()
    except (json.JSONDecodeError, OSError, ValidationError):
        logger.exception("Timeline load failed on startup, serving an empty timeline")
        catalog.set_eras([])


@app.on_event("shutdown")
async def shutdown_event():
    """Close the HTTP client on shutdown"""
    await wiki_client.close()


def era_not_found() -> JSONResponse:
    return JSONResponse(
        {"error": "era_not_found"}, status_code=status.HTTP_404_NOT_FOUND
    )


@app.get("/api/healthz")
async def health_check():
    """Simple health check endpoint"""
    return {"status": "ok"}


@app.get("/api/timeline")
async def get_timeline():
    """Return every era of the timeline"""
    return [era.model_dump(by_alias=True) for era in catalog.get_eras()]


@app.get("/api/eras/{index}")
async def get_era(index: int):
    """Return one era with its aggregated country view"""
    era = catalog.get_era(index)
    if era is None:
        return era_not_found()

    payload = EraResponse(
        index=index,
        era=era,
        countries=catalog.get_countries(index),
        artist_counts=count_artists(era),
    )
    return JSONResponse(payload.model_dump(by_alias=True))


@app.get("/api/eras/{index}/countries")
async def get_era_countries(index: int):
    """Return the aggregated country view of an era, null when it has no artists"""
    if catalog.get_era(index) is None:
        return era_not_found()

    countries = catalog.get_countries(index)
    if countries is None:
        return None
    return [country.model_dump() for country in countries]


@app.get("/api/thumbnails")
async def get_thumbnail(title: str = Query(..., min_length=1)):
    """Resolve a page title to its thumbnail URL"""
    state = await thumbnail_resolver.resolve(title)
    payload = ThumbnailResponse(title=title, status=state.status, src=state.src)

    response = JSONResponse(payload.model_dump())
    if state.status != "loaded":
        response.headers["Cache-Control"] = "no-store"
    return response


@app.post("/api/thumbnails/prefetch")
async def prefetch_thumbnails():
    """Start lookups for every page title in the timeline"""
    keys = catalog.lookup_keys()
    thumbnail_resolver.prefetch(keys)
    return JSONResponse(
        {"keys": len(keys), "cached": len(thumbnail_cache)},
        status_code=status.HTTP_202_ACCEPTED,
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=config.HOST, port=config.PORT)
