"""
Curated listings for the home page and publication sidebars.

Limits are checked by the query facade, not by FastAPI, so an out-of-range
limit comes back in the domain error shape.
"""

from typing import List

from fastapi import APIRouter

from thinktank.api.deps import DbSession
from thinktank.orchestration import QueryFacade
from thinktank.schemas.publication import PublicationSummary

router = APIRouter()


def _summaries(items) -> List[PublicationSummary]:
    return [PublicationSummary.model_validate(p) for p in items]


@router.get("/featured", response_model=List[PublicationSummary])
async def featured(db: DbSession, limit: int = 5):
    return _summaries(await QueryFacade(db).featured(limit))


@router.get("/popular", response_model=List[PublicationSummary])
async def popular(db: DbSession, limit: int = 5):
    return _summaries(await QueryFacade(db).popular(limit))


@router.get("/by-type/{type}", response_model=List[PublicationSummary])
async def by_type(type: str, db: DbSession, limit: int = 4):
    return _summaries(await QueryFacade(db).by_type(type, limit))


@router.get("/by-category/{category_id}", response_model=List[PublicationSummary])
async def by_category(category_id: int, db: DbSession, limit: int = 4):
    return _summaries(await QueryFacade(db).by_category(category_id, limit))


@router.get("/related/{slug}", response_model=List[PublicationSummary])
async def related(slug: str, db: DbSession, limit: int = 3):
    return _summaries(await QueryFacade(db).related(slug, limit))
