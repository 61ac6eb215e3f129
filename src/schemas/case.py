from typing import List, Optional, Union

from pydantic import BaseModel, StrictFloat, StrictInt, constr

# 数字 ID 或符号标签（如 "critical"）
SymbolicValue = Union[StrictInt, StrictFloat, constr(min_length=1)]


class CaseParam(BaseModel):
    title: str
    value: str


class CaseStep(BaseModel):
    action: str
    expected_result: Optional[str] = None
    data: Optional[str] = None
    position: Optional[int] = None


class CustomFieldValue(BaseModel):
    id: int
    value: str


class UpdateCaseRequest(BaseModel):
    code: str
    id: int
    title: Optional[str] = None
    description: Optional[str] = None
    preconditions: Optional[str] = None
    postconditions: Optional[str] = None

    # 以下字段接受符号标签，发送前解析为数字 ID
    severity: Optional[SymbolicValue] = None
    priority: Optional[SymbolicValue] = None
    type: Optional[SymbolicValue] = None
    behavior: Optional[SymbolicValue] = None
    automation: Optional[SymbolicValue] = None
    status: Optional[SymbolicValue] = None
    layer: Optional[SymbolicValue] = None

    suite_id: Optional[int] = None
    milestone_id: Optional[int] = None
    is_flaky: Optional[bool] = None
    params: Optional[List[CaseParam]] = None
    tags: Optional[List[str]] = None
    steps: Optional[List[CaseStep]] = None
    custom_fields: Optional[List[CustomFieldValue]] = None
