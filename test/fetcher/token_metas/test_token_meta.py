from hypothesis import given
from hypothesis.strategies import one_of

from token_metas.strategies import json_token_meta, link_token_meta, token_ref
from nftcat.fetcher.token_metas import JsonTokenMeta, LinkTokenMeta, TokenMeta, TokenRef


@given(one_of(link_token_meta(), json_token_meta()))
def test_token_meta_dicts(meta: TokenMeta):
    assert TokenMeta.from_dict(meta.to_dict()) == meta


@given(token_ref())
def test_token_ref_cache_key(ref: TokenRef):
    assert ref.cache_key == f"{ref.contract_address}:{ref.token_id}"
    assert ref == TokenRef(ref.contract_address, ref.token_id)
    assert len({ref, TokenRef(ref.contract_address, ref.token_id)}) == 1


def test_link_token_meta():
    meta = LinkTokenMeta("1", "ipfs://QmHash/1.json")
    assert meta.image == "ipfs://QmHash/1.json"
    assert meta.to_dict()["_nft_type"] == "link"


def test_json_token_meta():
    meta = JsonTokenMeta("7", {"name": "Plot 7", "imageLink": "https://img/7.png"})
    assert meta.image == "https://img/7.png"
    assert meta.fields == {"name": "Plot 7", "imageLink": "https://img/7.png"}
    assert "_nft_type" not in meta.to_dict()


def test_json_token_meta_without_image():
    assert JsonTokenMeta("7", {"name": "Plot 7"}).image is None


def test_token_meta_json():
    meta = JsonTokenMeta("7", {"a": 1})
    assert meta.to_json() == '{"a": 1, "tokenId": "7"}'


def test_from_dict_link_type_without_uri():
    d = {"_nft_type": "link", "name": "x", "tokenId": "4"}
    meta = TokenMeta.from_dict(d)
    assert meta == JsonTokenMeta("4", {"_nft_type": "link", "name": "x"})
    assert meta.to_dict() == d
    assert meta.image is None


def test_from_dict_link_type_with_extra_fields():
    d = {"_nft_type": "link", "token_uri": "ipfs://Qm", "name": "x", "tokenId": "4"}
    meta = TokenMeta.from_dict(d)
    assert isinstance(meta, JsonTokenMeta)
    assert meta.to_dict() == d
