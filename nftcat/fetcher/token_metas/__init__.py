"""
Module for normalizing on chain token metadata.

A cw721 ``token_uri`` is whatever the minter put there. In practice it's
one of

    * a link (``ipfs://...``, ``https://...``)
    * a base64 encoded json object
    * a plain json object

:func:`resolve` turns any of these into :class:`TokenMeta`.

Example:
    ::

        from nftcat.fetcher.token_metas import resolve

        resolve("ipfs://QmHash/1.json", "1").to_dict()
        # => {"_nft_type": "link", "token_uri": "ipfs://QmHash/1.json", "tokenId": "1"}
        resolve("eyJhIjoxfQ==", "2").to_dict()
        # => {"a": 1, "tokenId": "2"}
        resolve('{"a":1}', "3").to_dict()
        # => {"a": 1, "tokenId": "3"}
"""

from nftcat.fetcher.token_metas.token_meta import (
    TokenRef,
    TokenMeta,
    LinkTokenMeta,
    JsonTokenMeta,
)
from nftcat.fetcher.token_metas.resolver import (
    TokenMetaError,
    TokenMetaResolver,
    classify,
    resolve,
)
