from typing import List
from pydantic import BaseModel


class GradeBucket(BaseModel):
    range: str
    count: int


class GradeDistributionResponse(BaseModel):
    class_id: str
    distribution: List[GradeBucket]


class TeacherStatsResponse(BaseModel):
    total_classes: int
    total_assignments: int
    total_submissions: int
    pending_submissions: int
    avg_score: float


class MonthCount(BaseModel):
    year: int
    month: int
    count: int
