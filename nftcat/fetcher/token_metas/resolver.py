from __future__ import annotations
import base64
import binascii
import json
import logging
import re
from typing import Any, Dict

from nftcat.fetcher.token_metas.token_meta import (
    JsonTokenMeta,
    LinkTokenMeta,
    TokenMeta,
)

logger = logging.getLogger(__name__)

BASE64_ALPHABET = re.compile(r"[A-Za-z0-9+/=]*")

LINK = "link"
BASE64 = "base64"
JSON = "json"


class TokenMetaError(ValueError):
    """
    Raised when on chain token metadata can't be decoded.
    """

    #: Token id
    token_id: str
    #: Raw token uri
    token_uri: str

    def __init__(self, token_id: str, token_uri: str, reason: str):
        super().__init__(f"Malformed metadata for token `{token_id}`: {reason}")
        self.token_id = token_id
        self.token_uri = token_uri


def classify(token_uri: str) -> str:
    """
    Classify a raw ``token_uri``.

    Args:
        token_uri: token uri as stored on chain

    Returns:
        ``link``, ``base64`` or ``json``
    """
    if "://" in token_uri:
        return LINK
    if BASE64_ALPHABET.fullmatch(token_uri):
        return BASE64
    return JSON


def resolve(token_uri: str, token_id: str) -> TokenMeta:
    """
    Normalize a raw ``token_uri`` into :class:`TokenMeta`.

    Base64 padding is optional. A base64 candidate that doesn't decode
    to json is parsed as plain json.

    Args:
        token_uri: token uri as stored on chain
        token_id: token id, attached to the result

    Returns:
        :class:`LinkTokenMeta` or :class:`JsonTokenMeta`

    Raises:
        TokenMetaError: if the token uri is neither a link nor a json object
    """
    token_id = str(token_id)
    kind = classify(token_uri)
    if kind == LINK:
        return LinkTokenMeta(token_id, token_uri)

    if kind == BASE64:
        try:
            padded = token_uri + "=" * (-len(token_uri) % 4)
            decoded = base64.b64decode(padded, validate=True).decode("utf-8")
            fields = json.loads(decoded)
        except (binascii.Error, UnicodeDecodeError, ValueError) as e:
            logger.debug("Token %s is not base64 json (%s), parsing as json", token_id, e)
            fields = _parse_json(token_uri, token_id)
    else:
        fields = _parse_json(token_uri, token_id)

    if not isinstance(fields, dict):
        raise TokenMetaError(
            token_id, token_uri, f"expected json object, got {type(fields).__name__}"
        )
    return JsonTokenMeta(token_id, fields)


def _parse_json(token_uri: str, token_id: str) -> Any:
    try:
        return json.loads(token_uri)
    except ValueError as e:
        raise TokenMetaError(token_id, token_uri, str(e)) from e


class TokenMetaResolver:
    """
    Resolves ``nft_info`` query responses into :class:`TokenMeta`.
    """

    def resolve(self, token_uri: str, token_id: str) -> TokenMeta:
        """
        See :func:`resolve`
        """
        return resolve(token_uri, token_id)

    def resolve_nft_info(
        self, nft_info: Dict[str, Any] | None, token_id: str
    ) -> TokenMeta | None:
        """
        Resolve the payload of an ``nft_info`` query.

        Args:
            nft_info: ``nft_info`` payload or ``None``
            token_id: token id

        Returns:
            :class:`TokenMeta` or ``None`` if the token has no ``token_uri``
        """
        if not nft_info:
            return None
        token_uri = nft_info.get("token_uri")
        if not token_uri:
            return None
        return self.resolve(token_uri, token_id)
