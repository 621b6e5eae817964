"""
NFT data from cw721 contracts behind a CosmWasm REST gateway.
"""
