"""Who is asking, and who a trip belongs to.

Both are explicit two-variant types instead of a nullable id, so callers must
handle the anonymous/public case by name.
"""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class Authenticated(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["authenticated"] = "authenticated"
    user_id: str = Field(..., min_length=1)


class Anonymous(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["anonymous"] = "anonymous"


Requester = Annotated[Union[Authenticated, Anonymous], Field(discriminator="kind")]


class Owned(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["owned"] = "owned"
    user_id: str = Field(..., min_length=1)


class Public(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["public"] = "public"


Visibility = Annotated[Union[Owned, Public], Field(discriminator="kind")]


class RequestContext(BaseModel):
    """Resolved caller identity plus request provenance for the audit trail."""

    model_config = ConfigDict(frozen=True)

    requester: Requester = Field(default_factory=Anonymous)
    source_ip: str | None = None
    source_agent: str | None = None

    @property
    def actor_id(self) -> str | None:
        return requester_id(self.requester)


def requester_id(requester: Authenticated | Anonymous) -> str | None:
    if isinstance(requester, Authenticated):
        return requester.user_id
    return None


def visibility_for(requester: Authenticated | Anonymous) -> Owned | Public:
    """The visibility a requester creates, and the only one it may see."""
    if isinstance(requester, Authenticated):
        return Owned(user_id=requester.user_id)
    return Public()


def visibility_from_owner_id(owner_id: str | None) -> Owned | Public:
    return Owned(user_id=owner_id) if owner_id else Public()


def owner_id_of(visibility: Owned | Public) -> str | None:
    if isinstance(visibility, Owned):
        return visibility.user_id
    return None
