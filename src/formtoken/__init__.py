"""
Form Token Package

Single-use form tokens stored per session, per context name.
"""
from .registry import TokenRegistry, SESSION_KEY, FIELD_PREFIX
from .session_store import SessionStore, SessionBackend, InMemorySessionStore, RedisSessionStore
from .random_source import RandomStringSource, SecretRandomSource, SeededRandomSource
from .context import ContextNameProvider, StaticNameProvider, ContextVarNameProvider, use_context_name
from .request import RequestValueReader, MappingRequest

__all__ = [
    "TokenRegistry",
    "SESSION_KEY",
    "FIELD_PREFIX",
    "SessionStore",
    "SessionBackend",
    "InMemorySessionStore",
    "RedisSessionStore",
    "RandomStringSource",
    "SecretRandomSource",
    "SeededRandomSource",
    "ContextNameProvider",
    "StaticNameProvider",
    "ContextVarNameProvider",
    "use_context_name",
    "RequestValueReader",
    "MappingRequest",
]
