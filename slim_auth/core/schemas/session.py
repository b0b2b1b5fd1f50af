"""Session identity schemas"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class SessionUser(BaseModel):
    """Authenticated identity stored in the session cookie.

    Every field may be None when no user has been set yet.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: Optional[str] = Field(None, description="Authenticated user id")
    access_token: Optional[str] = Field(
        None, alias="accessToken", description="Access token issued for the user"
    )
    set_at: Optional[int] = Field(
        None, alias="setAt", description="Epoch milliseconds when the user was stored"
    )

    @property
    def is_authenticated(self) -> bool:
        return bool(self.id and self.access_token)


class AnonymousUser(BaseModel):
    """Visitor identity assigned before authentication"""

    model_config = ConfigDict(frozen=True)

    id: Optional[str] = None
