"""HTTP routes for the search service."""

from fastapi import APIRouter, Request, Response
from fastapi.responses import JSONResponse, PlainTextResponse
from loguru import logger
from pydantic import BaseModel

from websearch.search import InvalidEngineError, SearchOrchestrator
from websearch.search.orchestrator import DEFAULT_MAX_LINKS
from websearch.search.strategies import STRATEGIES

router = APIRouter()


class SearchRequest(BaseModel):
    engine: str
    query: str
    include_images: bool = False
    max_links: int = DEFAULT_MAX_LINKS


class SearchResponse(BaseModel):
    results: str
    links: list[str]
    images: list[str]


@router.post("/probe", status_code=204)
async def probe() -> Response:
    return Response(status_code=204)


@router.post("/search", response_model=SearchResponse)
async def search(body: SearchRequest, request: Request):
    if body.engine not in STRATEGIES:
        return PlainTextResponse("Invalid engine", status_code=400)

    orchestrator: SearchOrchestrator = request.app.state.orchestrator
    try:
        result = await orchestrator.search(
            body.engine,
            body.query,
            include_images=body.include_images,
            max_links=body.max_links,
        )
    except InvalidEngineError:
        return PlainTextResponse("Invalid engine", status_code=400)
    except Exception as e:
        logger.error(
            "Search failed (engine={}, query={!r}, stage={}): {}",
            body.engine,
            body.query,
            getattr(e, "stage", "unknown"),
            e,
        )
        return PlainTextResponse("Internal Server Error", status_code=500)

    return JSONResponse(result.to_dict())
