#!/usr/bin/env python3
"""
sensorboard API Schemas - Pydantic Models for Form Input and JSON Payloads
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator


class GraphRequest(BaseModel):
    """Graph inputs, from query parameters or submitted form fields."""
    sensors: List[int] = Field(default_factory=list)
    value: Optional[str] = None
    date_from: Optional[str] = None
    date_to: Optional[str] = None

    @field_validator("sensors", mode="before")
    @classmethod
    def _drop_blank_sensors(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, (str, int)):
            value = [value]
        return [v for v in value if v not in (None, "")]

    @field_validator("value", "date_from", "date_to", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    def is_complete(self) -> bool:
        return bool(self.sensors) and bool(self.value) and bool(self.date_from) and bool(self.date_to)


class ScriptForm(BaseModel):
    name: str = Field(..., min_length=1)
    script: str = Field(..., min_length=1)

    @field_validator("name")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("name must not be blank")
        return value


class SeriesStatPayload(BaseModel):
    sensor: str
    count: int
    average: Optional[float] = None
    min: Optional[float] = None
    max: Optional[float] = None
    diff: Optional[float] = None


class GraphPayload(BaseModel):
    """JSON answer of the graph-update action."""
    unit: Optional[str] = None
    value_type: str
    firstrow: List[str]
    values: List[List[Any]]        # [timestamp, v1, v2, ...]
    period: List[str]
    stats: Dict[str, SeriesStatPayload] = Field(default_factory=dict)
