"""
Fetcher module fetches NFT data from the smart contract REST gateway
and caches it for subsequent queries.

+---------------------------------------------------------+-------------------------------+
| Class                                                   | Description                   |
+=========================================================+===============================+
| :class:`nftcat.fetcher.nfts.NFTsService`                | Owned tokens, metadata,       |
|                                                         | owners, contract info         |
+---------------------------------------------------------+-------------------------------+
| :class:`nftcat.fetcher.gateway.GatewayClient`           | Smart contract queries        |
+---------------------------------------------------------+-------------------------------+
| :class:`nftcat.fetcher.token_metas.TokenMetaResolver`   | Decoding on chain token uris  |
+---------------------------------------------------------+-------------------------------+
| :class:`nftcat.fetcher.cache.MetadataCache`             | Redis / sqlite3 json cache    |
+---------------------------------------------------------+-------------------------------+

The best way to get started is to explore :class:`nftcat.fetcher.nfts.NFTsService`.
"""
