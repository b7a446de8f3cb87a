"""Race course records: listing, detail and remote import."""

import logging
from typing import List, Optional

import httpx
from fastapi import APIRouter, HTTPException, Query, Request

from app.models.race import MarathonSummary, RaceDistanceType
from app.models.request import RaceImportRequest
from app.models.response import RaceDetailResponse, RaceImportResponse
from app.routers.pages import limiter, summarize
from app.services.races import (
    fetch_races,
    find_related_races,
    generate_race_page_from_course,
    get_bundled_races,
    races_by_city,
    races_by_distance_type,
    to_summary,
    validate_course_data,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/races", response_model=List[MarathonSummary], summary="List bundled races")
@limiter.limit("30/minute")
async def list_races(
    request: Request,
    city: Optional[str] = Query(default=None, description="Only races held in this city."),
    distance_type: Optional[RaceDistanceType] = Query(default=None),
) -> List[MarathonSummary]:
    races = get_bundled_races()
    if city is not None:
        summaries = races_by_city(city, races)
    else:
        summaries = [to_summary(r) for r in races.values()]
    if distance_type is not None:
        allowed = {s.route_key for s in races_by_distance_type(distance_type, races)}
        summaries = [s for s in summaries if s.route_key in allowed]
    return summaries


@router.get("/races/{route_key}", response_model=RaceDetailResponse, summary="One race with related races")
@limiter.limit("30/minute")
async def race_detail(request: Request, route_key: str) -> RaceDetailResponse:
    races = get_bundled_races()
    race = races.get(route_key)
    if race is None:
        raise HTTPException(status_code=404, detail=f"Race '{route_key}' not found.")
    return RaceDetailResponse(
        race=to_summary(race),
        related=find_related_races(route_key, races),
        validation=validate_course_data(race),
    )


@router.post("/races/import", response_model=RaceImportResponse, summary="Import race records from a URL")
@limiter.limit("5/minute")
async def import_races(request: Request, body: RaceImportRequest) -> RaceImportResponse:
    """Fetch race records published as JSON and preview the pages they would produce.

    Nothing is added to the bundled catalogue.
    """
    url = str(body.url)
    logger.info("Race import request received", extra={"url": url})

    try:
        races = await fetch_races(url)
    except ValueError as exc:
        logger.warning("Rejected race data from %s – %s", url, exc)
        raise HTTPException(status_code=400, detail=str(exc))
    except httpx.TimeoutException:
        logger.error("Timeout fetching race data: %s", url)
        raise HTTPException(status_code=504, detail="The race data URL timed out.")
    except httpx.HTTPStatusError as exc:
        logger.error("HTTP error fetching race data %s: %s", url, exc)
        raise HTTPException(
            status_code=502, detail=f"Race data URL returned HTTP {exc.response.status_code}."
        )
    except (httpx.RequestError, RuntimeError) as exc:
        logger.error("Error fetching race data %s: %s", url, exc)
        raise HTTPException(status_code=502, detail=str(exc))

    return RaceImportResponse(
        source_url=url,
        races=[to_summary(r) for r in races.values()],
        validation={key: validate_course_data(r) for key, r in races.items()},
        pages=[summarize(generate_race_page_from_course(r)) for r in races.values()],
    )
