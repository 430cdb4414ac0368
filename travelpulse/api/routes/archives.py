"""Archive endpoints - snapshot, list, view read-only and delete."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status

from travelpulse.api.deps import get_trip_session, require_confirmation
from travelpulse.api.schemas import ArchiveSummary, TripResponse
from travelpulse.state.session import TripSession

router = APIRouter(prefix="/archives", tags=["archives"])

SessionDep = Annotated[TripSession, Depends(get_trip_session)]


@router.post("", response_model=ArchiveSummary, status_code=status.HTTP_201_CREATED)
async def create_archive(session: SessionDep) -> ArchiveSummary:
    """Snapshot the current trip into the archive collection."""
    archive = await session.archive_current_trip()
    if archive is None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT, detail="Cannot archive while viewing an archive"
        )
    return ArchiveSummary.from_archive(archive)


@router.get("", response_model=list[ArchiveSummary])
async def list_archives(session: SessionDep) -> list[ArchiveSummary]:
    """Archived trips, newest first."""
    return [ArchiveSummary.from_archive(a) for a in await session.list_archives()]


@router.post("/{archive_id}/view", response_model=TripResponse)
async def view_archive(archive_id: str, session: SessionDep) -> TripResponse:
    """Show an archive read-only. POST /trip/load returns to the live trip."""
    archive = await session.view_archive(archive_id)
    if archive is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Archive not found")
    return TripResponse.from_session(session)


@router.delete("/{archive_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_archive(archive_id: str, session: SessionDep, confirm: bool = Query(False)) -> None:
    """Delete one archive; deleting an unknown id succeeds."""
    require_confirmation(confirm)
    await session.delete_archive(archive_id)
