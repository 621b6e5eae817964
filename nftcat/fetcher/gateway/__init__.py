"""
Module for querying smart contracts over the REST gateway.

The main class of this module is :class:`GatewayClient`.
It encodes smart queries, sends them to the gateway and
unwraps the responses.

Example:
    ::

        from nftcat.fetcher.gateway import GatewayClient

        client = GatewayClient(rest="https://craft-rest.example.com")
        info = client.query(
            "craft182nff4ttmvshn6yjlqj5czapfcav9434l2qzz8aahf5pxnyd33ts98amul",
            {"contract_info": {}},
        )
        # => {"name": "craftd-re7", "symbol": "ctest"}

        result = client.execute(
            "craft182nff4ttmvshn6yjlqj5czapfcav9434l2qzz8aahf5pxnyd33ts98amul",
            {"nft_info": {"token_id": "2"}},
        )
        result.status
        # => "ok", "not_found" or "error"
"""

from nftcat.fetcher.gateway.query_result import QueryResult
from nftcat.fetcher.gateway.client import GatewayClient
