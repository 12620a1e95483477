from abc import ABC, abstractmethod
from typing import Any, Mapping, Optional

class RequestValueReader(ABC):
    """
    Read access to values submitted with an inbound request.
    """
    @abstractmethod
    def get_input_value(self, name: str) -> Optional[str]:
        pass

class MappingRequest(RequestValueReader):
    """
    Adapts parsed form/query data (a plain mapping or a multi-dict).
    Multi-valued fields yield their first value.
    """
    def __init__(self, data: Mapping[str, Any]):
        self.data = data

    def get_input_value(self, name: str) -> Optional[str]:
        value = self.data.get(name)
        if isinstance(value, (list, tuple)):
            value = value[0] if value else None
        if value is None:
            return None
        return str(value)
