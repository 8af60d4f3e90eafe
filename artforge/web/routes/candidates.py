"""
Route des illustrations candidates.

GET /candidates?tmdb_id=...&media_kind=...&artwork_type=... : liste les
illustrations proposées pour un média, chacune avec son URL de rendu signée.
"""

from dataclasses import asdict
from typing import Optional

from fastapi import APIRouter, Query, Request

from ...core.entities.render_requests import MediaKind
from ...services.artwork import ArtworkType

router = APIRouter()


@router.get("/candidates")
async def candidates(
    request: Request,
    tmdb_id: int = Query(..., ge=1),
    media_kind: MediaKind = MediaKind.MOVIE,
    artwork_type: ArtworkType = ArtworkType.POSTER,
    season_number: Optional[int] = Query(None, ge=0),
    episode_number: Optional[int] = Query(None, ge=0),
    episode_name: Optional[str] = None,
    language: Optional[str] = None,
) -> list[dict]:
    """Liste les candidats d'un média."""
    service = request.app.state.container.artwork_candidate_service()
    results = await service.get_candidates(
        tmdb_id,
        media_kind,
        artwork_type,
        season_number=season_number,
        episode_number=episode_number,
        episode_name=episode_name,
        language=language,
    )
    return [asdict(candidate) for candidate in results]
