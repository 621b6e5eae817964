from __future__ import annotations
import logging
from typing import Any, Dict
import requests

from nftcat.fetcher.core import Core
from nftcat.fetcher.gateway.query_result import QueryResult
from nftcat.fetcher.utils import encode_query, query_name, short_address

logger = logging.getLogger(__name__)

SMART_QUERY_PATH = "cosmwasm/wasm/v1/contract/{address}/smart/{query}"


class GatewayClient(Core):
    """
    Client for smart contract queries over the REST gateway.

    Every query is a json object that is base64 encoded into the
    url path, so all queries are plain http ``GET`` requests:

    ::

        GET {rest}/cosmwasm/wasm/v1/contract/{address}/smart/{base64(query)}

    The gateway wraps the query response into a ``data`` field
    which is unwrapped by the client.

    Failures are never raised. :meth:`execute` reports them as a
    :class:`QueryResult` and :meth:`query` as ``None``.

    Args:
        kwargs: Args for the :class:`nftcat.fetcher.core.Core`
    """

    def smart_query_url(self, contract_address: str, query: Dict[str, Any]) -> str:
        """
        Gateway url of a smart query.

        Args:
            contract_address: Contract address
            query: Smart query object

        Returns:
            Full url of the query
        """
        path = SMART_QUERY_PATH.format(
            address=contract_address, query=encode_query(query)
        )
        return f"{self.gateway_url}/{path}"

    def execute(self, contract_address: str, query: Dict[str, Any]) -> QueryResult:
        """
        Run a smart query against a contract.

        Args:
            contract_address: Contract address
            query: Smart query object, e.g. ``{"nft_info": {"token_id": "1"}}``

        Returns:
            :class:`QueryResult` with the ``data`` field of the response
        """
        url = self.smart_query_url(contract_address, query)
        name = query_name(query)
        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            logger.warning(
                "Query `%s` to %s failed: %s", name, short_address(contract_address), e
            )
            return QueryResult.failed(e)

        if response.status_code == 404:
            logger.debug(
                "Query `%s` to %s: not found", name, short_address(contract_address)
            )
            return QueryResult.not_found(response.status_code)

        try:
            response.raise_for_status()
            body = response.json()
        except (requests.exceptions.HTTPError, ValueError) as e:
            logger.warning(
                "Query `%s` to %s failed with status %s: %s",
                name,
                short_address(contract_address),
                response.status_code,
                e,
            )
            return QueryResult.failed(e, response.status_code)

        data = body.get("data") if isinstance(body, dict) else None
        if data is None:
            return QueryResult.not_found(response.status_code)
        return QueryResult.ok(data, response.status_code)

    def query(self, contract_address: str, query: Dict[str, Any]) -> Any | None:
        """
        Same as :meth:`execute` but returns the payload or ``None`` on any failure.

        Args:
            contract_address: Contract address
            query: Smart query object

        Returns:
            ``data`` field of the response or ``None``
        """
        return self.execute(contract_address, query).value
