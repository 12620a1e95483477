from html import escape
from pydantic import BaseModel, ConfigDict

class TokenField(BaseModel):
    """
    Name/value pair to submit back with a form.
    Immutable once created.
    """
    model_config = ConfigDict(frozen=True)

    name: str  # e.g. "token_checkout"
    value: str # the token itself

    def to_html(self) -> str:
        return '<input type="hidden" name="%s" value="%s" />' % (
            escape(self.name, quote=True),
            escape(self.value, quote=True),
        )
