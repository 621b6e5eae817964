"""
Module for fetching cw721 NFTs and caching their metadata.

The main class of this module is :class:`NFTsService`.

Example:
    ::

        from nftcat.fetcher.nfts import NFTsService

        contract = "craft182nff4ttmvshn6yjlqj5czapfcav9434l2qzz8aahf5pxnyd33ts98amul"
        wallet = "craft1hj5fveer5cjtn4wd6wstzugjfdxzl0xp86p9fl"

        service = NFTsService.create(rest="https://craft-rest.example.com")
        service.list_owned_token_ids(contract, wallet)
        # => {"tokens": ["1", "101", "102", "2", "8", "9"]}
        service.get_owned_tokens_metas(contract, wallet)
        # => [JsonTokenMeta({"name": "...", "imageLink": "...", "tokenId": "1"}), ...]
        service.get_image_for_token(contract, "2")
        # => "https://..."
"""

from nftcat.fetcher.nfts.contract_info import ContractInfo
from nftcat.fetcher.nfts.service import NFTsService, TokenListError
