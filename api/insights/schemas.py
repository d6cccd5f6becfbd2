from typing import Literal, Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


AnalysisType = Literal["performance", "workload", "risks", "recommendations"]


class AnalysisData(BaseModel):
    """Dashboard figures the client already has loaded."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    tasks: list[dict] = Field(default_factory=list)
    employees: list[dict] = Field(default_factory=list)
    departments: list[dict] = Field(default_factory=list)
    completion_rate: Optional[float] = None
    delayed_tasks: Optional[int] = None


class AnalysisRequest(BaseModel):
    type: AnalysisType
    data: AnalysisData = Field(default_factory=AnalysisData)
    language: Literal["ar", "en"] = "en"


class AnalysisResponse(BaseModel):
    analysis: str
