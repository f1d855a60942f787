"""Catalog browsing endpoints plus admin upload, edit and delete."""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_db, require_admin
from app.models.catalog import ContentType
from app.schema.catalog import CatalogSections, ContentRecordRead, ContentUpload, DisplayRecord
from app.services import catalog_service

router = APIRouter()


@router.get("", response_model=list[DisplayRecord])
async def list_catalog(
    content_type: ContentType | None = Query(default=None),
    limit: int | None = Query(default=None, ge=1, le=500),
    session: AsyncSession = Depends(get_db),
):
    """Flattened catalog, newest first; web series appear once per season."""
    return await catalog_service.list_catalog(session, content_type=content_type, limit=limit)


@router.get("/sections", response_model=CatalogSections)
async def list_catalog_sections(session: AsyncSession = Depends(get_db)) -> CatalogSections:
    return await catalog_service.list_catalog_sections(session)


@router.get("/featured", response_model=list[DisplayRecord])
async def list_featured(
    feature: str = Query(default=""),
    session: AsyncSession = Depends(get_db),
):
    """Entries tagged for a placement such as ``home_hero``; seasons are matched individually."""
    return await catalog_service.list_by_feature(session, feature.strip())


@router.get("/by-genre", response_model=list[DisplayRecord])
async def list_by_genre(
    genre: str = Query(default=""),
    session: AsyncSession = Depends(get_db),
):
    return await catalog_service.list_by_genre(session, genre.strip())


@router.get("/{display_id}", response_model=DisplayRecord)
async def get_display_record(display_id: str, session: AsyncSession = Depends(get_db)):
    """Resolve a movie or show id, or a ``<id>-season-<n>`` season id."""
    return await catalog_service.get_display_record(session, display_id)


@router.post(
    "",
    response_model=ContentRecordRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
async def upload_content(payload: ContentUpload, session: AsyncSession = Depends(get_db)) -> ContentRecordRead:
    record = await catalog_service.upload_content(session, payload)
    return ContentRecordRead.model_validate(record)


@router.put("/{record_id}", response_model=ContentRecordRead, dependencies=[Depends(require_admin)])
async def update_content(
    record_id: uuid.UUID, payload: ContentUpload, session: AsyncSession = Depends(get_db)
) -> ContentRecordRead:
    """Replace a record's content; changing ``content_type`` rebuilds its details."""
    record = await catalog_service.update_content(session, record_id, payload)
    return ContentRecordRead.model_validate(record)


@router.delete(
    "/{record_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    response_model=None,
    dependencies=[Depends(require_admin)],
)
async def delete_content(record_id: uuid.UUID, session: AsyncSession = Depends(get_db)) -> None:
    await catalog_service.delete_content(session, record_id)
