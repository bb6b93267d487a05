from typing import List, Optional
from pydantic import BaseModel

from classroom_portal.features.analytics.schemas import MonthCount


class AdminStatsResponse(BaseModel):
    total_users: int
    total_students: int
    total_teachers: int
    total_classes: int
    total_assignments: int
    total_submissions: int


class RoleCount(BaseModel):
    role: str
    count: int


class UserAnalyticsResponse(BaseModel):
    users_by_role: List[RoleCount]
    users_by_month: List[MonthCount]


class ClassStudentCount(BaseModel):
    id: str
    title: str
    code: str
    student_count: int


class ClassAnalyticsResponse(BaseModel):
    classes_by_month: List[MonthCount]
    classes_with_student_count: List[ClassStudentCount]


class AssignmentSubmissionCount(BaseModel):
    assignment_id: str
    title: Optional[str] = None
    count: int


class AssignmentAnalyticsResponse(BaseModel):
    assignments_by_month: List[MonthCount]
    submissions_by_assignment: List[AssignmentSubmissionCount]
