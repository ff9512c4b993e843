from pydantic import BaseModel, ConfigDict, Field
from typing import Literal, Optional

ERROR_PREFIX = "Error processing request: "

ErrorKind = Literal["transport", "malformed_response", "unexpected_shape"]


class GenerationRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    email_content: str = Field(alias="emailContent")
    tone: Optional[str] = None


class ReplyError(BaseModel):
    kind: ErrorKind
    message: str


class ReplyResult(BaseModel):
    ok: bool
    reply: Optional[str] = None
    error: Optional[ReplyError] = None

    @classmethod
    def success(cls, reply: str) -> "ReplyResult":
        return cls(ok=True, reply=reply)

    @classmethod
    def failure(cls, kind: ErrorKind, message: str) -> "ReplyResult":
        return cls(ok=False, error=ReplyError(kind=kind, message=message))

    def as_text(self) -> str:
        """Reply text, or the failure folded into a prefixed error string."""
        if self.ok:
            return self.reply
        return f"{ERROR_PREFIX}{self.error.message}"
