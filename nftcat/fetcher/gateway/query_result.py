from __future__ import annotations
from typing import Any

OK = "ok"
NOT_FOUND = "not_found"
ERROR = "error"


class QueryResult:
    """
    Outcome of a smart contract query.

    Lets callers tell "the contract has no such thing" apart from
    "the gateway could not be reached", while :attr:`value` keeps
    the simple ``None``-on-failure view.
    """

    #: One of ``ok``, ``not_found``, ``error``
    status: str
    #: Query payload (``data`` field of the gateway response)
    data: Any
    #: Exception for the ``error`` status
    error: Exception | None
    #: Http status code, if a response was received
    status_code: int | None

    def __init__(
        self,
        status: str,
        data: Any = None,
        error: Exception | None = None,
        status_code: int | None = None,
    ):
        self.status = status
        self.data = data
        self.error = error
        self.status_code = status_code

    @staticmethod
    def ok(data: Any, status_code: int | None = 200) -> QueryResult:
        return QueryResult(OK, data=data, status_code=status_code)

    @staticmethod
    def not_found(status_code: int | None = None) -> QueryResult:
        return QueryResult(NOT_FOUND, status_code=status_code)

    @staticmethod
    def failed(error: Exception, status_code: int | None = None) -> QueryResult:
        return QueryResult(ERROR, error=error, status_code=status_code)

    @property
    def is_ok(self) -> bool:
        return self.status == OK

    @property
    def is_not_found(self) -> bool:
        return self.status == NOT_FOUND

    @property
    def is_error(self) -> bool:
        return self.status == ERROR

    @property
    def value(self) -> Any:
        """
        Payload if the query succeeded, ``None`` otherwise
        """
        return self.data if self.is_ok else None

    def __eq__(self, other):
        if type(other) is type(self):
            return self.__dict__ == other.__dict__
        return False

    def __repr__(self):
        return f'QueryResult({{"status": {self.status}, "status_code": {self.status_code}, "data": {self.data}, "error": {self.error!r}}})'
