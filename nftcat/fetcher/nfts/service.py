from __future__ import annotations
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, List

from nftcat.fetcher.cache import (
    CONTRACT_INFO_BUCKET,
    QUERY_TOKEN_BUCKET,
    MetadataCache,
)
from nftcat.fetcher.gateway import GatewayClient
from nftcat.fetcher.nfts.contract_info import ContractInfo
from nftcat.fetcher.token_metas import TokenMeta, TokenMetaResolver, TokenRef
from nftcat.fetcher.utils import short_address, token_id_sort_key

logger = logging.getLogger(__name__)

DEFAULT_OWNED_LIMIT = 500
DEFAULT_ALL_TOKENS_LIMIT = 100
DEFAULT_START_AFTER = "0"
DEFAULT_MAX_WORKERS = 16


class TokenListError(LookupError):
    """
    Raised when the gateway doesn't return the token list of a contract.
    """

    #: Contract address
    contract_address: str

    def __init__(self, contract_address: str):
        super().__init__(f"Could not list tokens of contract `{contract_address}`")
        self.contract_address = contract_address


class NFTsService:
    """
    Service for fetching cw721 NFTs: owned tokens, token metadata,
    owners and contract info.

    Token metadata and contract info are served from :class:`MetadataCache`
    when possible. Token lists and owners always go to the gateway.

    **Request/Response flow** (owned tokens metadata)

    ::

                   +-------------+          +---------------+ +-------------------+ +---------------+
                   | NFTsService |          | GatewayClient | | TokenMetaResolver | | MetadataCache |
                   +-------------+          +---------------+ +-------------------+ +---------------+
        ---------------  |                          |                   |                   |
        | Request NFTs |-|                          |                   |                   |
        |--------------| |                          |                   |                   |
                         | List owned token ids     |                   |                   |
                         |------------------------->|                   |                   |
                         |                          |                   |                   |
                         | For each token: find metadata                |                   |
                         |------------------------------------------------------------------>|
                         |                          |                   |                   |
                         | If not found: nft_info   |                   |                   |
                         |------------------------->|                   |                   |
                         |                          |                   |                   |
                         | Resolve token_uri        |                   |                   |
                         |--------------------------------------------->|                   |
                         |                          |                   |                   |
                         | Save metadata            |                   |                   |
                         |------------------------------------------------------------------>|
            -----------  |                          |                   |                   |
            | Response |-|                          |                   |                   |
            |----------| |                          |                   |                   |

    Args:
        gateway: :class:`GatewayClient` instance
        cache: :class:`MetadataCache` instance
        resolver: :class:`TokenMetaResolver` instance
        max_workers: Max number of concurrent metadata fetches
    """

    _gateway: GatewayClient
    _cache: MetadataCache
    _resolver: TokenMetaResolver
    _max_workers: int

    def __init__(
        self,
        gateway: GatewayClient,
        cache: MetadataCache,
        resolver: TokenMetaResolver | None = None,
        max_workers: int = DEFAULT_MAX_WORKERS,
    ):
        self._gateway = gateway
        self._cache = cache
        self._resolver = resolver or TokenMetaResolver()
        self._max_workers = max_workers

    @staticmethod
    def create(max_workers: int = DEFAULT_MAX_WORKERS, **kwargs) -> NFTsService:
        """
        Create an instance of :class:`NFTsService`

        Args:
            max_workers: Max number of concurrent metadata fetches
            kwargs: Args for the :class:`nftcat.fetcher.core.Core`

        Returns:
            An instance of :class:`NFTsService`
        """
        gateway = GatewayClient(**kwargs)
        cache = MetadataCache.create(**kwargs)
        return NFTsService(gateway, cache, max_workers=max_workers)

    def list_owned_token_ids(
        self,
        contract_address: str,
        wallet: str,
        limit: int = DEFAULT_OWNED_LIMIT,
        start_after: str = DEFAULT_START_AFTER,
    ) -> Dict[str, List[str]] | None:
        """
        List token ids owned by a wallet.

        Only one page of at most ``limit`` tokens is fetched.

        Args:
            contract_address: cw721 contract address
            wallet: Owner address
            limit: Max number of token ids
            start_after: Token id to start after

        Returns:
            Gateway response, e.g. ``{"tokens": ["1", "101", "2"]}``, or ``None``
        """
        return self._gateway.query(
            contract_address,
            {"tokens": {"owner": wallet, "start_after": start_after, "limit": limit}},
        )

    def list_all_tokens(
        self,
        contract_address: str,
        limit: int = DEFAULT_ALL_TOKENS_LIMIT,
        start_after: str = DEFAULT_START_AFTER,
    ) -> List[Any]:
        """
        List tokens of a contract sorted by token id, numeric ids first.

        Args:
            contract_address: cw721 contract address
            limit: Max number of tokens
            start_after: Token id to start after

        Returns:
            Sorted tokens

        Raises:
            TokenListError: if the gateway didn't return the token list
        """
        data = self._gateway.query(
            contract_address,
            {"all_tokens": {"start_after": start_after, "limit": limit}},
        )
        if not data or data.get("tokens") is None:
            raise TokenListError(contract_address)
        return sorted(data["tokens"], key=token_id_sort_key)

    def get_owner_of(self, contract_address: str, token_id: str) -> str:
        """
        Owner of a token.

        Args:
            contract_address: cw721 contract address
            token_id: Token id

        Returns:
            Owner address or ``""`` if it can't be determined
        """
        data = self._gateway.query(
            contract_address, {"all_nft_info": {"token_id": str(token_id)}}
        )
        access = (data or {}).get("access") or {}
        return access.get("owner") or ""

    def get_token_meta(self, contract_address: str, token_id: str) -> TokenMeta | None:
        """
        Metadata of a token, cached for a day.

        Args:
            contract_address: cw721 contract address
            token_id: Token id

        Returns:
            :class:`TokenMeta` or ``None`` if the token has no metadata

        Raises:
            TokenMetaError: if the on chain metadata is malformed
        """
        ref = TokenRef(contract_address, token_id)
        data = self._cache.get_or_fetch(
            QUERY_TOKEN_BUCKET, ref.cache_key, lambda: self._fetch_token_meta(ref)
        )
        if data is None:
            return None
        return TokenMeta.from_dict(data)

    def get_owned_tokens_metas(
        self, contract_address: str, wallet: str
    ) -> List[TokenMeta | None]:
        """
        Metadata of every token owned by a wallet.

        Metadata is fetched concurrently. The result follows the order of
        the owned token ids, ``None`` marking tokens without metadata.
        Any error fails the whole call.

        Args:
            contract_address: cw721 contract address
            wallet: Owner address

        Returns:
            List of :class:`TokenMeta`, empty if the wallet owns nothing
        """
        owned = self.list_owned_token_ids(contract_address, wallet)
        token_ids = (owned or {}).get("tokens") or []
        logger.debug(
            "Wallet %s owns %d tokens of %s",
            short_address(wallet),
            len(token_ids),
            short_address(contract_address),
        )
        if len(token_ids) == 0:
            return []

        workers = max(1, min(self._max_workers, len(token_ids)))
        with ThreadPoolExecutor(max_workers=workers) as pool:
            return list(
                pool.map(lambda t: self.get_token_meta(contract_address, t), token_ids)
            )

    def get_contract_info(self, contract_address: str) -> ContractInfo | None:
        """
        Contract name and symbol, cached permanently.

        Args:
            contract_address: cw721 contract address

        Returns:
            :class:`ContractInfo` or ``None`` if the gateway has no info
        """
        data = self._cache.get_or_fetch(
            CONTRACT_INFO_BUCKET,
            contract_address,
            lambda: self._gateway.query(contract_address, {"contract_info": {}}),
        )
        if data is None:
            return None
        return ContractInfo.from_dict(data)

    def get_image_for_token(self, contract_address: str, token_id: str) -> str | None:
        """
        Image of a token: the link itself for off chain metadata,
        ``imageLink`` field for on chain metadata.

        Args:
            contract_address: cw721 contract address
            token_id: Token id

        Returns:
            Image link or ``None``
        """
        meta = self.get_token_meta(contract_address, token_id)
        if meta is None:
            return None
        return meta.image

    def clear_cache(self):
        """
        Delete all cached entries
        """
        self._cache.clear(QUERY_TOKEN_BUCKET)
        self._cache.clear(CONTRACT_INFO_BUCKET)

    def _fetch_token_meta(self, ref: TokenRef) -> Dict[str, Any] | None:
        nft_info = self._gateway.query(
            ref.contract_address, {"nft_info": {"token_id": ref.token_id}}
        )
        meta = self._resolver.resolve_nft_info(nft_info, ref.token_id)
        if meta is None:
            logger.debug("Token %s has no token_uri", ref.cache_key)
            return None
        return meta.to_dict()
