from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class ChartCalculationRequest(BaseModel):
    """
    Either eventId or hashtags selects the stats record. Without charts,
    the stored active chart configurations are calculated.
    """
    model_config = ConfigDict(populate_by_name=True)

    event_id: Optional[str] = Field(default=None, alias="eventId")
    hashtags: Optional[Union[str, List[str]]] = None
    match: Literal["and", "or"] = "and"
    charts: Optional[List[Dict[str, Any]]] = None

    @field_validator("event_id")
    @classmethod
    def _strip_event_id(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        value = value.strip()
        return value or None

    @model_validator(mode="after")
    def _one_source(self) -> ChartCalculationRequest:
        if (self.event_id is None) == (self.hashtags is None):
            raise ValueError("Provide exactly one of eventId or hashtags")
        return self


class ChartValidationRequest(BaseModel):
    configuration: Dict[str, Any]
    stats: Optional[Dict[str, Any]] = None
