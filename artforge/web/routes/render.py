"""
Route de rendu des illustrations.

GET /render?token=... : décode le jeton, produit l'image et la renvoie.
- jeton absent ou vide : 400 "Missing token."
- jeton invalide : 400 "Invalid token."
- aucune image source : 404, corps vide
- succès : 200, octets de l'image avec son type MIME
"""

from typing import Optional

from fastapi import APIRouter, Request
from fastapi.responses import PlainTextResponse, Response

from ...services.rendering.dispatcher import BadRequest, NotFound
from ...utils.constants import RENDER_ROUTE

router = APIRouter()


@router.get(RENDER_ROUTE)
async def render(request: Request, token: Optional[str] = None) -> Response:
    """Rend l'illustration décrite par le jeton."""
    dispatcher = request.app.state.container.render_dispatcher()
    outcome = await dispatcher.handle(token)

    if isinstance(outcome, BadRequest):
        return PlainTextResponse(outcome.message, status_code=400)
    if isinstance(outcome, NotFound):
        return Response(status_code=404)
    return Response(content=outcome.data, media_type=outcome.mime_type)
