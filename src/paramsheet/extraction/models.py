"""Pydantic models for the structured output of an extraction run."""
from __future__ import annotations

from typing import Any, Dict, Iterator, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

__all__ = [
    "ExtractedRowValues",
    "ExtractedValue",
    "KeyValuePair",
    "MatrixResult",
    "ParameterGroup",
    "ParameterRow",
    "ParameterTarget",
    "ParameterType",
    "RowValue",
    "Variant",
]

ParameterType = Literal["text", "number", "select", "curve"]


class _Model(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    def to_payload(self) -> Dict[str, Any]:
        """Serialise using the camelCase keys expected by the application store."""

        return self.model_dump(by_alias=True)


class ParameterRow(_Model):
    """A single parameter found in (or configured for) a sheet."""

    id: str
    name: str
    unit: str = ""
    user_comment: str = Field("", alias="userComment")
    check_status: str = Field("", alias="checkStatus")
    type: ParameterType = "text"
    options: Optional[List[str]] = None
    is_simulation_relevant: bool = Field(False, alias="isSimulationRelevant")
    mandatory: bool = False
    default_value: Any = Field(None, alias="defaultValue")
    source_row: Optional[int] = Field(None, alias="sourceRow")
    source_col: Optional[int] = Field(None, alias="sourceCol")

    @field_validator("unit", "user_comment", "check_status", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value


class ParameterGroup(_Model):
    group_name: str = Field(..., alias="groupName")
    parameters: List[ParameterRow] = Field(default_factory=list)


class Variant(_Model):
    id: str
    name: str
    values: Dict[str, Any] = Field(default_factory=dict)


class MatrixResult(_Model):
    """Parameter groups plus the per-variant value columns of one sheet."""

    parameter_groups: List[ParameterGroup] = Field(default_factory=list, alias="parameterGroups")
    variants: List[Variant] = Field(default_factory=list)

    def iter_parameters(self) -> Iterator[ParameterRow]:
        for group in self.parameter_groups:
            yield from group.parameters

    def parameter_index(self) -> Dict[str, ParameterRow]:
        return {parameter.id: parameter for parameter in self.iter_parameters()}


class ParameterTarget(_Model):
    """A parameter to look for during targeted extraction."""

    id: str
    name: str

    @classmethod
    def from_row(cls, row: ParameterRow) -> "ParameterTarget":
        return cls(id=row.id, name=row.name)


class ExtractedValue(_Model):
    parameter_id: str = Field(..., alias="parameterId")
    original_name: str = Field(..., alias="originalName")
    found_value: Any = Field(None, alias="foundValue")
    confidence: float = Field(..., ge=0.0, le=100.0)
    source_cell: str = Field(..., alias="sourceCell")
    row: int
    col: int


class RowValue(_Model):
    column: int
    value: Any


class ExtractedRowValues(_Model):
    parameter_id: str = Field(..., alias="parameterId")
    original_name: str = Field(..., alias="originalName")
    values: List[RowValue] = Field(default_factory=list)
    confidence: float = Field(..., ge=0.0, le=100.0)
    label_row: int = Field(..., alias="labelRow")
    label_col: int = Field(..., alias="labelCol")


class KeyValuePair(_Model):
    key: str
    value: Any
    row: int
