from typing import Optional

ERROR_INVALID_TOKEN = "invalidFormToken"

class UserError(Exception):
    """
    Error meant to be shown to the end user.
    The host framework maps `code` (and optionally `domain`) to a response.
    """
    def __init__(self, code: str, domain: Optional[str] = None):
        self.code = code
        self.domain = domain
        super().__init__(code)

class InvalidTokenError(UserError):
    """
    Raised when a submitted form token is missing, unknown or already consumed.
    Deliberately carries no detail about which.
    """
    def __init__(self, domain: Optional[str] = None):
        super().__init__(ERROR_INVALID_TOKEN, domain)
