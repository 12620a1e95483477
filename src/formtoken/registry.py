from typing import Dict, Optional
from .context import ContextNameProvider, ContextVarNameProvider
from .random_source import RandomStringSource, SecretRandomSource
from .request import RequestValueReader
from .session_store import SessionStore
from ..core.config import TokenSettings, get_settings
from ..core.errors import InvalidTokenError
from ..core.logger import get_logger
from ..core.types import TokenField

logger = get_logger("TokenRegistry")

SESSION_KEY = "FORM_TOKENS"
FIELD_PREFIX = "token_"

class TokenRegistry:
    """
    Limits the use of form data to one shot (or `max_usage` shots).

    Session layout: FORM_TOKENS -> {name: {token: usage_count}}.
    Buckets are insertion ordered; the oldest token is evicted when full.
    The registry holds no bucket state, only its configuration and the
    last token it rendered.
    """
    def __init__(self, store: SessionStore, name: Optional[str] = None,
                 token_limit: Optional[int] = None, max_usage: Optional[int] = None,
                 settings: Optional[TokenSettings] = None,
                 random_source: Optional[RandomStringSource] = None,
                 context_provider: Optional[ContextNameProvider] = None):
        self.settings = settings if settings is not None else get_settings()
        self.store = store

        # Resolved once: later changes of the ambient context do not move the bucket
        if not name:
            provider = context_provider if context_provider is not None else ContextVarNameProvider()
            name = provider.current_name()
        if not name:
            raise ValueError("No context name given and none available from the provider")
        self.name = name

        self.token_limit = token_limit if token_limit is not None else self.settings.token_limit
        self.max_usage = max_usage if max_usage is not None else self.settings.max_usage
        if self.token_limit < 1:
            raise ValueError(f"token_limit must be >= 1, got {self.token_limit}")
        if self.max_usage < 1:
            raise ValueError(f"max_usage must be >= 1, got {self.max_usage}")

        self.random_source = random_source if random_source is not None \
            else SecretRandomSource(self.settings.alphabet)
        self.last_token: Optional[str] = None

    @property
    def field_name(self) -> str:
        return FIELD_PREFIX + self.name

    def generate_token(self) -> str:
        """
        Issues a new token with usage 0, evicting the oldest ones if the bucket is full.
        """
        with self.store.lock(SESSION_KEY):
            buckets = self.store.get(SESSION_KEY)
            if buckets is None:
                buckets = {}
            bucket = buckets.setdefault(self.name, {})

            token = self.random_source.generate(self.settings.token_length)
            while token in bucket:
                token = self.random_source.generate(self.settings.token_length)

            # Another registry may have filled this bucket under a larger limit
            evicted = 0
            while len(bucket) >= self.token_limit:
                del bucket[next(iter(bucket))]
                evicted += 1

            bucket[token] = 0
            self.store.set(SESSION_KEY, buckets)

        if evicted:
            logger.info("token_evicted", context=self.name, evicted=evicted, token_limit=self.token_limit)
        logger.debug("token_generated", context=self.name, bucket_size=len(bucket))
        return token

    def render_reference(self, force: bool = False) -> TokenField:
        """
        Returns the field to embed in the form.
        Without `force`, the first token issued by this instance is reused so
        rendering the same form twice does not burn bucket capacity.
        """
        if force:
            token = self.generate_token()
        else:
            if self.last_token is None:
                self.last_token = self.generate_token()
            token = self.last_token
        return TokenField(name=self.field_name, value=token)

    def __str__(self) -> str:
        return self.render_reference().to_html()

    def validate(self, token: Optional[str]) -> bool:
        """
        Consumes one usage of `token`. Returns True if it was live.
        A token reaching max_usage is removed for good.
        """
        if not isinstance(token, str) or not token:
            return False

        with self.store.lock(SESSION_KEY):
            buckets = self.store.get(SESSION_KEY)
            if not buckets:
                return False
            bucket = buckets.get(self.name)
            if not bucket or token not in bucket:
                return False

            bucket[token] += 1
            usage = bucket[token]
            if usage >= self.max_usage:
                del bucket[token]
            self.store.set(SESSION_KEY, buckets)

        logger.debug("token_consumed", context=self.name, usage=usage, max_usage=self.max_usage)
        return True

    def validate_from_request(self, request: RequestValueReader) -> bool:
        return self.validate(request.get_input_value(self.field_name))

    def enforce_from_request(self, request: RequestValueReader, domain: Optional[str] = None):
        """
        Validates the token submitted with `request` or raises InvalidTokenError.
        """
        if not self.validate_from_request(request):
            logger.warning("invalid_form_token", context=self.name, domain=domain)
            raise InvalidTokenError(domain)

    def bucket(self) -> Dict[str, int]:
        """Snapshot of the live tokens and their usage counts, oldest first."""
        buckets = self.store.get(SESSION_KEY) or {}
        return dict(buckets.get(self.name, {}))
