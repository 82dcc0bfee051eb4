"""
Plan models: the externally produced word set and daily quota.

Plans are validated at the boundary. Both the camelCase shape written by the
placement screens and snake_case are accepted.
"""

from typing import Any, Literal

import pydantic
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from .exceptions import ValidationError

ContextId = Literal["law", "travel", "it", "senior"]
StyleId = Literal["simple", "professional", "academic"]
Origin = Literal["placement", "userText", "pool"]


class _PlanModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )


class VocabItem(_PlanModel):
    """A vocabulary entry. ``id`` defaults to the lowercased term."""

    id: str
    term: str
    translation: str = ""
    origin: Origin = Field(
        default="pool", validation_alias=pydantic.AliasChoices("origin", "source")
    )

    @model_validator(mode="before")
    @classmethod
    def _coerce_shape(cls, data: Any) -> Any:
        if isinstance(data, str):
            data = {"term": data}
        if isinstance(data, dict):
            data = dict(data)
            term = data.get("term")
            if isinstance(term, str):
                data["term"] = term.strip()
                if not data.get("id"):
                    data["id"] = term.strip().lower()
        return data

    @field_validator("id", "term")
    @classmethod
    def _not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be blank")
        return v


class Recommendation(_PlanModel):
    per_day: int = Field(default=0, ge=0)
    per_week: int = Field(default=0, ge=0)
    total: int = Field(default=0, ge=0)


class Plan(_PlanModel):
    """
    Target word set and daily quota for one learning context.

    Attributes:
        context: Learning domain (law, travel, it, senior).
        created_at: Creation time as epoch milliseconds. A new value marks a new plan.
        recommendation: Suggested pace; ``per_day`` drives the daily target.
        today_set: Ordered subset of items suggested for today.
        pool: All known items for the context.
        comfort_mode: Selects the gentler first-touch interval preset.
    """

    context: ContextId = Field(
        default="travel", validation_alias=pydantic.AliasChoices("context", "contextId")
    )
    style: StyleId = "simple"
    created_at: int = Field(ge=0)
    name: str | None = None
    horizon: int | None = Field(default=None, ge=1)
    recommendation: Recommendation | None = None
    today_set: list[VocabItem] = Field(default_factory=list)
    pool: list[VocabItem] = Field(
        default_factory=list,
        validation_alias=pydantic.AliasChoices("pool", "weekPackage"),
    )
    comfort_mode: bool = False

    def all_item_ids(self) -> list[str]:
        """Ids of today_set followed by pool, deduplicated in first-seen order."""
        return list(dict.fromkeys(item.id for item in [*self.today_set, *self.pool]))

    def items_by_id(self) -> dict[str, VocabItem]:
        items: dict[str, VocabItem] = {}
        for item in [*self.today_set, *self.pool]:
            items.setdefault(item.id, item)
        return items

    def daily_target(self) -> int:
        """recommendation.per_day if positive, else the size of today_set."""
        if self.recommendation and self.recommendation.per_day > 0:
            return self.recommendation.per_day
        return len(self.today_set)

    @classmethod
    def parse(cls, data: Any) -> "Plan":
        """Validate raw data into a Plan, raising the domain ValidationError."""
        if not isinstance(data, dict):
            raise ValidationError(f"Plan must be a mapping, got {type(data).__name__}.")
        try:
            return cls.model_validate(data)
        except pydantic.ValidationError as e:
            raise ValidationError(f"Malformed plan: {e}") from e

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
