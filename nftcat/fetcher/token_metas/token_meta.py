from __future__ import annotations
import json
from typing import Any, Dict

NFT_TYPE_FIELD = "_nft_type"
LINK_NFT_TYPE = "link"
TOKEN_ID_FIELD = "tokenId"
LINK_FIELDS = {NFT_TYPE_FIELD, "token_uri"}


class TokenRef:
    """
    Reference to a single NFT within a contract.
    """

    __slots__ = ("_contract_address", "_token_id")

    def __init__(self, contract_address: str, token_id: str):
        self._contract_address = contract_address
        self._token_id = str(token_id)

    @property
    def contract_address(self) -> str:
        """
        Contract address
        """
        return self._contract_address

    @property
    def token_id(self) -> str:
        """
        Token id
        """
        return self._token_id

    @property
    def cache_key(self) -> str:
        """
        Key of the token in a cache bucket, ``{contract_address}:{token_id}``
        """
        return f"{self._contract_address}:{self._token_id}"

    def __eq__(self, other):
        if type(other) is type(self):
            return self.cache_key == other.cache_key
        return False

    def __hash__(self):
        return hash(self.cache_key)

    def __repr__(self):
        return f'TokenRef({{"contract_address": {self.contract_address}, "token_id": {self.token_id}}})'


class TokenMeta:
    """
    Normalized token metadata.

    This is either a :class:`LinkTokenMeta` (``token_uri`` points somewhere
    else, e.g. ``ipfs://`` or ``https://``) or a :class:`JsonTokenMeta`
    (metadata is stored on chain).

    Both serialize to the same flat json shape that is kept in the cache
    and handed to the viewers:

    ::

        {"_nft_type": "link", "token_uri": "ipfs://...", "tokenId": "1"}
        {"name": "Plot 7", "imageLink": "https://...", "tokenId": "7"}
    """

    #: Token id
    token_id: str

    def __init__(self, token_id: str):
        self.token_id = str(token_id)

    @property
    def image(self) -> str | None:
        """
        Image link of the token
        """
        raise NotImplementedError

    def to_dict(self) -> Dict[str, Any]:
        raise NotImplementedError

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> TokenMeta:
        """
        Create :class:`LinkTokenMeta` or :class:`JsonTokenMeta` from dict

        Only the exact link shape is a link, on chain json may use
        ``_nft_type`` too.
        """
        fields = dict(d)
        token_id = fields.pop(TOKEN_ID_FIELD)
        if fields.get(NFT_TYPE_FIELD) == LINK_NFT_TYPE and set(fields) == LINK_FIELDS:
            return LinkTokenMeta(token_id, fields["token_uri"])
        return JsonTokenMeta(token_id, fields)

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    def __eq__(self, other):
        if type(other) is type(self):
            return self.__dict__ == other.__dict__
        return False

    def __repr__(self):
        return f"{type(self).__name__}({self.to_json()})"


class LinkTokenMeta(TokenMeta):
    """
    Metadata stored off chain, ``token_uri`` is a link.
    """

    #: The link, verbatim
    token_uri: str

    def __init__(self, token_id: str, token_uri: str):
        super().__init__(token_id)
        self.token_uri = token_uri

    @property
    def image(self) -> str | None:
        return self.token_uri

    def to_dict(self) -> Dict[str, Any]:
        return {
            NFT_TYPE_FIELD: LINK_NFT_TYPE,
            "token_uri": self.token_uri,
            TOKEN_ID_FIELD: self.token_id,
        }


class JsonTokenMeta(TokenMeta):
    """
    Metadata stored on chain as json (plain or base64 encoded).
    """

    #: Decoded json fields (without ``tokenId``)
    fields: Dict[str, Any]

    def __init__(self, token_id: str, fields: Dict[str, Any]):
        super().__init__(token_id)
        self.fields = {k: v for k, v in fields.items() if k != TOKEN_ID_FIELD}

    @property
    def image(self) -> str | None:
        return self.fields.get("imageLink")

    def to_dict(self) -> Dict[str, Any]:
        return {**self.fields, TOKEN_ID_FIELD: self.token_id}
