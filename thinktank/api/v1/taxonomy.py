"""
Publication categories and tags.
"""

from typing import List

from fastapi import APIRouter, Request, status

from thinktank.api.deps import AdminCaller, CurrentCaller, DbSession, get_client_ip
from thinktank.schemas.publication import CategoryCreate, CategoryResponse, TagCreate, TagResponse
from thinktank.services.directory_service import CategoryService, TagService

router = APIRouter()


@router.get("/categories", response_model=List[CategoryResponse])
async def list_categories(caller: CurrentCaller, db: DbSession):
    items, _ = await CategoryService(db).list(caller, limit=500)
    return [CategoryResponse.model_validate(c) for c in sorted(items, key=lambda c: c.name.lower())]


@router.post("/categories", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
async def create_category(request: Request, data: CategoryCreate, caller: AdminCaller, db: DbSession):
    category = await CategoryService(db).create(
        caller, data.model_dump(), ip_address=get_client_ip(request)
    )
    return CategoryResponse.model_validate(category)


@router.patch("/categories/{category_id}", response_model=CategoryResponse)
async def update_category(
    request: Request,
    category_id: int,
    data: CategoryCreate,
    caller: AdminCaller,
    db: DbSession,
):
    category = await CategoryService(db).update(
        caller, category_id, data.model_dump(exclude_unset=True), ip_address=get_client_ip(request)
    )
    return CategoryResponse.model_validate(category)


@router.delete("/categories/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_category(request: Request, category_id: int, caller: AdminCaller, db: DbSession):
    await CategoryService(db).delete(caller, category_id, ip_address=get_client_ip(request))


@router.get("/tags", response_model=List[TagResponse])
async def list_tags(caller: CurrentCaller, db: DbSession):
    items, _ = await TagService(db).list(caller, limit=500)
    return [TagResponse.model_validate(t) for t in sorted(items, key=lambda t: t.name.lower())]


@router.post("/tags", response_model=TagResponse, status_code=status.HTTP_201_CREATED)
async def create_tag(request: Request, data: TagCreate, caller: AdminCaller, db: DbSession):
    tag = await TagService(db).create(caller, data.model_dump(), ip_address=get_client_ip(request))
    return TagResponse.model_validate(tag)


@router.delete("/tags/{tag_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_tag(request: Request, tag_id: int, caller: AdminCaller, db: DbSession):
    await TagService(db).delete(caller, tag_id, ip_address=get_client_ip(request))
