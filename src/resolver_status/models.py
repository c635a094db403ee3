from enum import StrEnum
from typing import Any, Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

ResolverCategory = Literal["admin", "api", "scheduled", "unknown"]
ResolverOperation = Literal["mutation", "query", "subscription", "task", "unknown"]


class DeploymentStatus(StrEnum):
    PROD = "Deployed to Prod"
    STAGE = "Deployed to Stage"
    DEV = "Deployed to Dev"
    CODE_COMPLETE = "Code Complete"
    IN_PROGRESS = "In Progress"


class EnvironmentConfig(BaseModel):
    """Deployment flags of a resolver. ``None`` means the flag was not written."""

    local: bool | None = None
    dev: bool | None = None
    stage: bool | None = None
    prod: bool | None = None

    def recognized_fields(self) -> dict[str, bool]:
        return self.model_dump(exclude_none=True)


class ResolverRecord(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(min_length=1)
    # Snapshots written by the earlier tool used "type" for the category.
    category: ResolverCategory = Field(validation_alias=AliasChoices("category", "type"))
    operation: ResolverOperation
    status: DeploymentStatus


StatusRegistry = dict[str, ResolverRecord]


class PageProperty(BaseModel):
    model_config = ConfigDict(extra="allow")

    type: str


class TrackerPage(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    properties: dict[str, PageProperty] = Field(default_factory=dict)

    def payload(self, name: str) -> dict[str, Any] | None:
        prop = self.properties.get(name)
        if prop is None:
            return None
        return prop.model_dump()


class TrackerPageBatch(BaseModel):
    model_config = ConfigDict(extra="ignore")

    results: list[TrackerPage] = Field(default_factory=list)
    next_cursor: str | None = None
