"""Pingdom API payload schemas.

Records only live for the duration of a single poll tick.
"""

from pydantic import BaseModel, ConfigDict, Field


class Tag(BaseModel):
    """Tag attached to a check or transaction."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    name: str


class CheckRecord(BaseModel):
    """Schema for an uptime check as returned by GET /checks."""

    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)

    id: int | None = None
    name: str
    hostname: str = ""
    resolution: int = Field(0, description="Check interval in minutes")
    status: str = Field(..., description="up, down, unconfirmed_down, unknown or paused")
    paused: bool = False
    last_response_time: int = Field(0, alias="lastresponsetime", description="Milliseconds")
    tags: list[Tag] = Field(default_factory=list)

    @property
    def tag_names(self) -> list[str]:
        return [tag.name for tag in self.tags]


class TransactionRecord(BaseModel):
    """Schema for a transaction (TMS recipe) as returned by GET /tms.recipes."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    id: int | None = None
    name: str
    kitchen: str = ""
    status: str = Field(..., description="SUCCESSFUL or FAILING")
    active: str = Field("YES", description="YES or NO")
    tags: list[Tag] = Field(default_factory=list)

    @property
    def tag_names(self) -> list[str]:
        return [tag.name for tag in self.tags]


class CheckListResponse(BaseModel):
    """Schema for the GET /checks response body."""

    model_config = ConfigDict(extra="ignore")

    checks: list[CheckRecord] = Field(default_factory=list)


class TransactionListResponse(BaseModel):
    """Schema for the GET /tms.recipes response body.

    Pingdom keys recipes by their id; a plain list is accepted as well.
    """

    model_config = ConfigDict(extra="ignore")

    recipes: dict[str, TransactionRecord] | list[TransactionRecord] = Field(
        default_factory=list
    )

    @property
    def transactions(self) -> list[TransactionRecord]:
        if isinstance(self.recipes, dict):
            return list(self.recipes.values())
        return list(self.recipes)
