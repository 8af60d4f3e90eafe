"""
Tests unitaires pour la protection des jetons de rendu.

Ces tests verifient:
- L'aller-retour protect/unprotect pour des charges vides, courtes et grandes
- Le format base64url sans padding des jetons
- La detection de toute alteration, troncature ou mauvaise cle
- Les erreurs d'entree et de decodage
"""

import os

import pytest

from artforge.services.token_protection import (
    NONCE_SIZE,
    TAG_SIZE,
    TokenDecodingError,
    TokenError,
    TokenInputError,
    TokenIntegrityError,
    TokenProtector,
    base64url_decode,
    base64url_encode,
)


class TestBase64Url:
    """Tests pour l'encodage base64url sans padding."""

    @pytest.mark.parametrize(
        "data,expected",
        [
            (b"", ""),
            (b"f", "Zg"),
            (b"fo", "Zm8"),
            (b"foo", "Zm9v"),
            (b"\xfb\xff", "-_8"),
        ],
    )
    def test_encode_known_values(self, data: bytes, expected: str) -> None:
        assert base64url_encode(data) == expected
        assert base64url_decode(expected) == data

    @pytest.mark.parametrize("text", ["abc$", "ab+/", "Zg==", "a b", "é"])
    def test_rejects_characters_outside_alphabet(self, text: str) -> None:
        with pytest.raises(TokenDecodingError):
            base64url_decode(text)

    def test_rejects_impossible_length(self) -> None:
        """Une longueur de 4n+1 ne peut pas venir d'un encodage base64."""
        with pytest.raises(TokenDecodingError):
            base64url_decode("Zm9vY")


class TestTokenProtector:
    """Tests pour TokenProtector."""

    @pytest.mark.parametrize("size", [0, 1, 16, 1_000, 1_000_000])
    def test_round_trip(self, token_protector: TokenProtector, size: int) -> None:
        """Les octets d'origine sont restitues quelle que soit leur taille."""
        data = os.urandom(size)

        token = token_protector.protect(data)

        assert token_protector.unprotect(token) == data

    def test_token_is_url_safe(self, token_protector: TokenProtector) -> None:
        token = token_protector.protect(b'{"type":"poster","tmdbId":27205}')

        assert "=" not in token
        assert "+" not in token
        assert "/" not in token

    def test_compression_shrinks_repetitive_payloads(
        self, token_protector: TokenProtector
    ) -> None:
        data = b'{"posterFilePath":"/abc.jpg"}' * 100

        token = token_protector.protect(data)

        assert len(token) < len(data)

    def test_same_payload_gives_different_tokens(self, token_protector: TokenProtector) -> None:
        """Le nonce aleatoire rend chaque jeton unique."""
        data = b"same payload"

        assert token_protector.protect(data) != token_protector.protect(data)

    def test_same_secret_shares_tokens(self, token_protector: TokenProtector) -> None:
        """Deux protecteurs avec le meme secret sont interchangeables."""
        other = TokenProtector(secret="test-secret-for-render-tokens")

        assert other.unprotect(token_protector.protect(b"payload")) == b"payload"

    def test_bytes_secret_equivalent_to_str(self, token_protector: TokenProtector) -> None:
        other = TokenProtector(secret=b"test-secret-for-render-tokens")

        assert other.unprotect(token_protector.protect(b"payload")) == b"payload"

    def test_every_tampered_byte_is_detected(self, token_protector: TokenProtector) -> None:
        """Modifier n'importe quel octet du jeton fait echouer l'authentification."""
        raw = base64url_decode(token_protector.protect(b"render me"))

        for index in range(len(raw)):
            tampered = bytearray(raw)
            tampered[index] ^= 0x01
            with pytest.raises(TokenIntegrityError):
                token_protector.unprotect(base64url_encode(bytes(tampered)))

    def test_appended_byte_is_detected(self, token_protector: TokenProtector) -> None:
        raw = base64url_decode(token_protector.protect(b"render me"))

        with pytest.raises(TokenIntegrityError):
            token_protector.unprotect(base64url_encode(raw + b"\x00"))

    def test_wrong_key_is_detected(self, token_protector: TokenProtector) -> None:
        token = TokenProtector(secret="another-secret").protect(b"payload")

        with pytest.raises(TokenIntegrityError):
            token_protector.unprotect(token)

    def test_ephemeral_secret_when_not_configured(self) -> None:
        """Sans secret, chaque protecteur a sa propre cle."""
        first = TokenProtector()
        second = TokenProtector(secret="")
        token = first.protect(b"payload")

        assert first.unprotect(token) == b"payload"
        with pytest.raises(TokenIntegrityError):
            second.unprotect(token)

    @pytest.mark.parametrize("length", [0, 1, NONCE_SIZE, NONCE_SIZE + TAG_SIZE - 1])
    def test_truncated_token(self, token_protector: TokenProtector, length: int) -> None:
        raw = base64url_decode(token_protector.protect(b"payload"))
        truncated = base64url_encode(raw[:length]) or "AAAA"

        with pytest.raises(TokenIntegrityError):
            token_protector.unprotect(truncated)

    @pytest.mark.parametrize("token", ["", "   ", "\t\n"])
    def test_blank_token(self, token_protector: TokenProtector, token: str) -> None:
        with pytest.raises(TokenInputError):
            token_protector.unprotect(token)

    @pytest.mark.parametrize("token", ["not a token", "abc$def", "Zm9vY"])
    def test_undecodable_token(self, token_protector: TokenProtector, token: str) -> None:
        with pytest.raises(TokenDecodingError):
            token_protector.unprotect(token)

    def test_all_errors_share_base_class(self) -> None:
        assert issubclass(TokenInputError, TokenError)
        assert issubclass(TokenDecodingError, TokenError)
        assert issubclass(TokenIntegrityError, TokenError)
