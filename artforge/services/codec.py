"""
Codec des requêtes de rendu.

Transforme une requête typée en jeton opaque et inversement :

    requête -> JSON compact (champ discriminant "type") -> TokenProtector -> jeton

Le décodage ne reconstruit que les variantes déclarées dans RenderRequest ;
une étiquette inconnue ou un champ invalide lève UnsupportedRenderRequestError.
"""

from typing import Any

from pydantic import TypeAdapter, ValidationError

from artforge.core.entities.render_requests import RENDER_REQUEST_TYPES, RenderRequest
from artforge.services.token_protection import (
    TokenProtector,
    UnsupportedRenderRequestError,
)
from artforge.utils.constants import RENDER_ROUTE

_REQUEST_ADAPTER: TypeAdapter[Any] = TypeAdapter(RenderRequest)


class RenderRequestCodec:
    """
    Encode et décode les requêtes de rendu.

    Example:
        codec = RenderRequestCodec(TokenProtector(secret))
        token = codec.encode(request)
        assert codec.decode(token) == request
    """

    def __init__(self, protector: TokenProtector) -> None:
        self._protector = protector

    def serialize(self, request: Any) -> bytes:
        """
        Sérialise une requête en JSON compact.

        Raises:
            TypeError: si l'objet n'est pas une variante de RenderRequest
        """
        if not isinstance(request, RENDER_REQUEST_TYPES):
            raise TypeError(
                f"Render request type '{type(request).__name__}' is not supported."
            )
        return _REQUEST_ADAPTER.dump_json(request)

    def deserialize(self, data: bytes) -> Any:
        """
        Reconstruit une requête depuis son JSON.

        Raises:
            UnsupportedRenderRequestError: étiquette inconnue ou champs invalides
        """
        try:
            return _REQUEST_ADAPTER.validate_json(data)
        except ValidationError as e:
            raise UnsupportedRenderRequestError(
                f"Token does not describe a supported render request: "
                f"{e.error_count()} error(s)"
            ) from e

    def encode(self, request: Any) -> str:
        """Encode une requête en jeton."""
        return self._protector.protect(self.serialize(request))

    def decode(self, token: str) -> Any:
        """
        Décode un jeton en requête.

        Raises:
            TokenError: jeton vide, non décodable, altéré ou de variante inconnue
        """
        return self.deserialize(self._protector.unprotect(token))


class RenderUrlBuilder:
    """Construit l'URL de rendu prête à l'emploi d'une requête."""

    def __init__(self, codec: RenderRequestCodec, public_base_url: str = "") -> None:
        self._codec = codec
        self._base_url = public_base_url.rstrip("/")

    def build_url(self, request: Any) -> str:
        """
        Args:
            request: Variante de RenderRequest

        Returns:
            "<base>/render?token=<jeton>" (chemin relatif si aucune base n'est configurée)
        """
        token = self._codec.encode(request)
        return f"{self._base_url}{RENDER_ROUTE}?token={token}"
