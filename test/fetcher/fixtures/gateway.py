import base64
import json
import os
import threading
from typing import Any, Dict, List, Tuple
import pytest
import requests

from nftcat.fetcher.gateway import GatewayClient

REST = "http://localhost:1317"
CONTRACT = "craft182nff4ttmvshn6yjlqj5czapfcav9434l2qzz8aahf5pxnyd33ts98amul"
UNKNOWN_CONTRACT = "craft1unknownunknownunknownunknownunknownunknownunknownunknown"
PLOTS_CONTRACT = "craft1plotsplotsplotsplotsplotsplotsplotsplotsplotsplotsplotsplo"
WALLET = "craft1hj5fveer5cjtn4wd6wstzugjfdxzl0xp86p9fl"
EMPTY_WALLET = "craft1ee6rgnqvhgyv35vxqcjcz7w8eqdrldw8v5xzy4"
SMART_PREFIX = "/cosmwasm/wasm/v1/contract/"


class ResponseMock:
    status_code: int
    _body: Any

    def __init__(self, status_code: int, body: Any):
        self.status_code = status_code
        self._body = body

    def json(self) -> Any:
        if isinstance(self._body, str):
            return json.loads(self._body)
        return self._body

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(
                f"{self.status_code} Error", response=self
            )


class GatewayMock:
    """
    Stands in for :class:`requests.Session`, serving cw721 smart queries
    from ``contracts.json``.
    """

    number_of_calls: int
    queries: List[Tuple[str, Dict[str, Any]]]
    #: Raised from every ``get`` when set
    fail: Exception | None

    def __init__(self):
        current_folder = os.path.realpath(os.path.dirname(__file__))
        with open(f"{current_folder}/contracts.json", "r") as f:
            self._contracts = json.load(f)
        self._lock = threading.Lock()
        self.number_of_calls = 0
        self.queries = []
        self.fail = None

    def get(self, url: str, timeout: float | None = None, **kwargs) -> ResponseMock:
        with self._lock:
            self.number_of_calls += 1
        if not self.fail is None:
            raise self.fail

        assert url.startswith(REST + SMART_PREFIX), url
        address, _, encoded = url[len(REST + SMART_PREFIX) :].partition("/smart/")
        query = json.loads(base64.b64decode(encoded))
        with self._lock:
            self.queries.append((address, query))

        if not address in self._contracts:
            return ResponseMock(404, {"code": 5, "message": "not found"})
        contract = self._contracts[address]
        name, args = next(iter(query.items()))
        data = getattr(self, f"_{name}")(contract, args)
        if data is None:
            return ResponseMock(
                500, {"code": 2, "message": "cw721_base::state::TokenInfo not found"}
            )
        return ResponseMock(200, {"data": data})

    def query_names(self) -> List[str]:
        return [next(iter(q)) for _, q in self.queries]

    def _tokens(self, contract: Dict[str, Any], args: Dict[str, Any]):
        tokens = [
            token_id
            for token_id, nft in contract["nfts"].items()
            if nft["owner"] == args["owner"]
        ]
        return {"tokens": tokens[: args["limit"]]}

    def _all_tokens(self, contract: Dict[str, Any], args: Dict[str, Any]):
        return {"tokens": contract["all_tokens"][: args["limit"]]}

    def _nft_info(self, contract: Dict[str, Any], args: Dict[str, Any]):
        nft = contract["nfts"].get(args["token_id"])
        if nft is None:
            return None
        return {"token_uri": nft["token_uri"], "extension": None}

    def _all_nft_info(self, contract: Dict[str, Any], args: Dict[str, Any]):
        nft = contract["nfts"].get(args["token_id"])
        if nft is None:
            return None
        return {
            "access": {"owner": nft["owner"], "approvals": []},
            "info": {"token_uri": nft["token_uri"], "extension": None},
        }

    def _contract_info(self, contract: Dict[str, Any], args: Dict[str, Any]):
        return contract["contract_info"]


@pytest.fixture
def gateway_mock() -> GatewayMock:
    """
    Mock instance of the gateway http session
    """
    return GatewayMock()


@pytest.fixture
def gateway_client(gateway_mock: GatewayMock) -> GatewayClient:
    """
    Instance of gateway.GatewayClient talking to the mock
    """
    return GatewayClient(rest=REST, session=gateway_mock)
