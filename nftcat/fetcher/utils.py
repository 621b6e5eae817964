"""
Utility functions.
"""

import base64
import json
from typing import Any, Dict, Tuple, Union


def json_compact(obj: Any) -> str:
    """
    Serialize ``obj`` to json without whitespace.

    The gateway sees exactly the bytes we base64 encode, so the
    serialization has to be stable.

    Args:
        obj: json serializable object

    Returns:
        json string
    """
    return json.dumps(obj, separators=(",", ":"))


def encode_query(query: Dict[str, Any]) -> str:
    """
    Encode a smart contract query for the gateway url.

    Args:
        query: Smart query object, e.g. ``{"contract_info": {}}``

    Returns:
        Base64 of the compact json query

    Examples:
        ::

            print(encode_query({"contract_info": {}}))
            # eyJjb250cmFjdF9pbmZvIjp7fX0=
    """
    return base64.b64encode(json_compact(query).encode("utf-8")).decode("ascii")


def query_name(query: Dict[str, Any]) -> str:
    """
    Name of the smart query (the single top level key), e.g. ``nft_info``.
    """
    return next(iter(query), "")


def short_address(address: str) -> str:
    """
    Converts bech32 address to short version (for display purposes only).

    Args:
        address: Address to shorten

    Returns:
        Short version of the address.

    Examples:
        ::

            print(short_address("craft1hj5fveer5cjtn4wd6wstzugjfdxzl0xp86p9fl"))
            # craft1hj5f...p9fl

    """
    if len(address) <= 14:
        return address
    return f"{address[:10]}...{address[-4:]}"


def token_id_sort_key(token: Union[str, int, Dict[str, Any]]) -> Tuple[int, int, str]:
    """
    Sort key for a token id or a token with ``token_id`` field.

    Numeric ids sort numerically, any other ids follow them in
    string order.

    Args:
        token: token id (``"10"``) or token dict (``{"token_id": "10"}``)

    Returns:
        Sort key
    """
    if isinstance(token, dict):
        token = token["token_id"]
    token = str(token)
    if token.isascii() and token.isdigit():
        return (0, int(token), "")
    return (1, 0, token)
