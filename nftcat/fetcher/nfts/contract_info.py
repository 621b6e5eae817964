from __future__ import annotations
from typing import Any, Dict


class ContractInfo:
    """
    cw721 contract info (name, symbol).
    """

    #: Collection name
    name: str
    #: Collection symbol
    symbol: str

    def __init__(self, name: str, symbol: str):
        self.name = name
        self.symbol = symbol

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert :class:`ContractInfo` to dict
        """
        return {"name": self.name, "symbol": self.symbol}

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> ContractInfo:
        """
        Create :class:`ContractInfo` from dict
        """
        return ContractInfo(name=d.get("name", ""), symbol=d.get("symbol", ""))

    def __eq__(self, other):
        if type(other) is type(self):
            return self.__dict__ == other.__dict__
        return False

    def __repr__(self):
        return f'ContractInfo({{"name": {self.name}, "symbol": {self.symbol}}})'
