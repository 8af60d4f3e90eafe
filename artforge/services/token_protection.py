"""
Protection des jetons de rendu.

Un jeton est la forme opaque, authentifiée et sûre pour une URL d'une charge
utile binaire. Pipeline (compression puis chiffrement) :

    données -> zlib -> AES-256-GCM (nonce aléatoire 96 bits) -> nonce||chiffré||tag
            -> base64url sans padding

La clé est dérivée (HKDF-SHA256) du secret du processus. Sans secret configuré,
un secret aléatoire est généré au démarrage : les jetons émis ne survivent alors
pas au redémarrage du processus.

Toute altération d'un octet, une mauvaise clé ou un jeton tronqué lève
TokenIntegrityError, jamais des données erronées.
"""

import base64
import binascii
import os
import re
import secrets
import zlib
from typing import Optional, Union

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.kdf.hkdf import HKDF
from loguru import logger

# Contexte de dérivation : isole les clés des jetons de rendu de tout autre usage du secret
TOKEN_PURPOSE = b"artforge.render-token.v1"

NONCE_SIZE = 12
TAG_SIZE = 16
KEY_SIZE = 32

_BASE64URL_PATTERN = re.compile(r"^[A-Za-z0-9_-]*$")


class TokenError(Exception):
    """Erreur de base pour les jetons invalides."""


class TokenInputError(TokenError):
    """Jeton vide ou composé uniquement d'espaces."""


class TokenDecodingError(TokenError):
    """Texte hors de l'alphabet base64url ou de longueur invalide."""


class TokenIntegrityError(TokenError):
    """Échec d'authentification : jeton altéré, tronqué ou émis avec une autre clé."""


class UnsupportedRenderRequestError(TokenIntegrityError):
    """Le jeton est authentique mais ne décrit aucune variante de requête connue."""


def base64url_encode(data: bytes) -> str:
    """Encode en base64url sans caractère de padding."""
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def base64url_decode(text: str) -> bytes:
    """
    Décode du base64url sans padding.

    Raises:
        TokenDecodingError: si le texte sort de l'alphabet ou a une longueur impossible
    """
    if not _BASE64URL_PATTERN.match(text):
        raise TokenDecodingError("Token contains characters outside the base64url alphabet.")
    if len(text) % 4 == 1:
        raise TokenDecodingError("Token has an invalid base64url length.")

    padded = text + "=" * (-len(text) % 4)
    try:
        return base64.b64decode(padded, altchars=b"-_", validate=True)
    except binascii.Error as e:
        raise TokenDecodingError("Token is not valid base64url.") from e


class TokenProtector:
    """
    Chiffrement authentifié des charges utiles des jetons.

    Example:
        protector = TokenProtector(secret="change-me")
        token = protector.protect(b'{"type":"poster"}')
        data = protector.unprotect(token)
    """

    def __init__(self, secret: Optional[Union[str, bytes]] = None) -> None:
        """
        Initialise le protecteur.

        Args:
            secret: Secret du processus. None ou vide : secret aléatoire éphémère.
        """
        if not secret:
            logger.warning(
                "Aucun secret de jeton configuré (ARTFORGE_TOKEN_SECRET), "
                "génération d'un secret éphémère"
            )
            secret = secrets.token_bytes(KEY_SIZE)
        if isinstance(secret, str):
            secret = secret.encode("utf-8")

        key = HKDF(
            algorithm=hashes.SHA256(),
            length=KEY_SIZE,
            salt=None,
            info=TOKEN_PURPOSE,
        ).derive(secret)
        self._aead = AESGCM(key)

    def protect(self, data: bytes) -> str:
        """
        Compresse, chiffre et encode une charge utile.

        Args:
            data: Octets à protéger (éventuellement vides)

        Returns:
            Jeton base64url sans padding
        """
        nonce = os.urandom(NONCE_SIZE)
        sealed = self._aead.encrypt(nonce, zlib.compress(data), TOKEN_PURPOSE)
        return base64url_encode(nonce + sealed)

    def unprotect(self, token: str) -> bytes:
        """
        Décode, authentifie et décompresse un jeton.

        Args:
            token: Jeton produit par protect()

        Returns:
            Les octets d'origine

        Raises:
            TokenInputError: jeton vide
            TokenDecodingError: texte non base64url
            TokenIntegrityError: authentification ou décompression impossible
        """
        if token is None or not token.strip():
            raise TokenInputError("Token is empty.")

        raw = base64url_decode(token)
        if len(raw) < NONCE_SIZE + TAG_SIZE:
            raise TokenIntegrityError("Token is truncated.")

        nonce, sealed = raw[:NONCE_SIZE], raw[NONCE_SIZE:]
        try:
            compressed = self._aead.decrypt(nonce, sealed, TOKEN_PURPOSE)
        except InvalidTag as e:
            raise TokenIntegrityError("Token failed authentication.") from e

        try:
            return zlib.decompress(compressed)
        except zlib.error as e:
            raise TokenIntegrityError("Token payload cannot be decompressed.") from e
