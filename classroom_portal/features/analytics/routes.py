from typing import Dict
from fastapi import APIRouter, Depends

from classroom_portal.features.analytics.helpers import average_score, grade_distribution
from classroom_portal.features.analytics.schemas import GradeDistributionResponse, TeacherStatsResponse
from classroom_portal.features.assignments.crud import get_assignments_by_class, get_assignments_by_classes
from classroom_portal.features.auth.permissions import require_staff_access, require_teacher_access
from classroom_portal.features.classes.crud import get_classes_by_teacher
from classroom_portal.features.classes.helpers import ensure_class_manager, get_class_or_404
from classroom_portal.features.submissions.crud import count_submissions, get_graded_scores

router = APIRouter()


@router.get("/class/{class_id}/grades", response_model=GradeDistributionResponse)
def fetch_grade_distribution(
    class_id: str,
    user: Dict = Depends(require_staff_access)
):
    """Histogram of graded scores across the class's assignments."""
    class_doc = get_class_or_404(class_id)
    ensure_class_manager(class_doc, user)

    assignment_ids = [assignment["id"] for assignment in get_assignments_by_class(class_id)]
    scores = get_graded_scores(assignment_ids)
    return {"class_id": class_id, "distribution": grade_distribution(scores)}


@router.get("/teacher/stats", response_model=TeacherStatsResponse)
def fetch_teacher_stats(user: Dict = Depends(require_teacher_access)):
    class_ids = [class_doc["id"] for class_doc in get_classes_by_teacher(user["id"])]
    assignment_ids = [assignment["id"] for assignment in get_assignments_by_classes(class_ids)]

    return {
        "total_classes": len(class_ids),
        "total_assignments": len(assignment_ids),
        "total_submissions": count_submissions(assignment_ids),
        "pending_submissions": count_submissions(assignment_ids, status="submitted"),
        "avg_score": average_score(get_graded_scores(assignment_ids)),
    }
