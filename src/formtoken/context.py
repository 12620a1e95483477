"""
Resolution of the default context name (typically the current route).
"""
from abc import ABC, abstractmethod
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator, Optional

_current_context_name: ContextVar[Optional[str]] = ContextVar("form_token_context_name", default=None)

class ContextNameProvider(ABC):
    @abstractmethod
    def current_name(self) -> Optional[str]:
        pass

class StaticNameProvider(ContextNameProvider):
    def __init__(self, name: str):
        self.name = name

    def current_name(self) -> Optional[str]:
        return self.name

class ContextVarNameProvider(ContextNameProvider):
    """
    Reads the name bound by use_context_name() for the running request.
    Works across threads and asyncio tasks.
    """
    def current_name(self) -> Optional[str]:
        return _current_context_name.get()

@contextmanager
def use_context_name(name: str) -> Iterator[None]:
    """
    Binds `name` as the current context for the duration of the block.
    Host frameworks call this around request handling, with the route name.
    """
    reset_token = _current_context_name.set(name)
    try:
        yield
    finally:
        _current_context_name.reset(reset_token)
