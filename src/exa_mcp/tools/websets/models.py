"""Input models for the Websets tools."""

from typing import Any, Literal, Optional

from pydantic import BaseModel, Field

EntityType = Literal["company", "person", "article", "research_paper", "custom"]
SearchBehavior = Literal["override", "append"]
EnrichmentFormat = Literal["text", "date", "number", "options", "email", "phone"]
MonitorCadence = Literal["hourly", "daily", "weekly", "monthly"]
WebhookEvent = Literal[
    "webset.created",
    "webset.deleted",
    "webset.paused",
    "webset.idle",
    "webset.search.created",
    "webset.search.completed",
    "webset.search.canceled",
    "webset.item.created",
    "webset.item.enriched",
    "import.created",
    "import.completed",
    "webset.monitor.run.started",
    "webset.monitor.run.completed",
]


class WebsetEntity(BaseModel):
    type: EntityType = Field(..., description="Entity type to focus on")


class SearchCriterion(BaseModel):
    description: str = Field(
        ..., description="Evaluation criterion (e.g., 'Must have office in California')"
    )


class EnrichmentOption(BaseModel):
    label: str = Field(..., description="Option label")


class WebsetSearchConfig(BaseModel):
    """Search that finds and verifies Webset items."""

    query: str = Field(..., description="Search query for finding items. URLs will be crawled for context.")
    count: Optional[int] = Field(default=None, description="Target number of items to find (default: 10)")
    entity: Optional[WebsetEntity] = Field(
        default=None, description="Entity type (auto-detected if not provided)"
    )
    criteria: Optional[list[SearchCriterion]] = Field(
        default=None, description="Evaluation criteria (auto-detected if not provided)"
    )
    behavior: Optional[SearchBehavior] = Field(
        default=None, description="override replaces existing items, append adds to them"
    )

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)


class EnrichmentConfig(BaseModel):
    """Data to extract from every item of a Webset."""

    description: str = Field(..., description="Description of the data to extract")
    format: Optional[EnrichmentFormat] = Field(
        default=None, description="Expected format (auto-detected if not provided)"
    )
    options: Optional[list[EnrichmentOption]] = Field(
        default=None, description="Predefined options (required if format is 'options')"
    )
    metadata: Optional[dict[str, str]] = Field(default=None, description="Key-value metadata")

    @property
    def missing_options(self) -> bool:
        return self.format == "options" and not self.options

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)


class ItemFilters(BaseModel):
    """Local filters applied by search_webset_items_exa."""

    type: Optional[str] = Field(
        default=None, description="Filter by item type (e.g., 'company', 'person', 'article')"
    )
    verification_status: Optional[Literal["verified", "pending", "failed"]] = Field(
        default=None, description="Filter by verification status"
    )
    has_enriched_data: Optional[bool] = Field(
        default=None, description="Filter items that have (or lack) enriched data"
    )
    url_pattern: Optional[str] = Field(default=None, description="Filter by URL pattern (regex)")
    title_pattern: Optional[str] = Field(default=None, description="Filter by title pattern (regex)")
