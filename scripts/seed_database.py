"""
Fill the Cosmos containers with demo data: an admin, 3 teachers, 15
students, 5 classes, 10 assignments and a spread of submissions.

Safe to run repeatedly. Users are matched by email, classes by code and
assignments by title within their class. Every demo account uses the
password ``password123``.
"""
import logging
import random
from datetime import datetime, timedelta, timezone

from dotenv import load_dotenv

from classroom_portal.database.nosql_crud_helpers import to_iso
from classroom_portal.features.assignments.crud import add_assignment, get_assignments_by_class
from classroom_portal.features.auth.auth_helpers import hash_password
from classroom_portal.features.classes.crud import add_class, add_member, get_class_by_code
from classroom_portal.features.submissions.crud import (
    get_submission_for_student,
    grade_submission,
    save_submission,
)
from classroom_portal.features.users.crud import create_user, get_user_by_email

load_dotenv()

logger = logging.getLogger(__name__)

DEMO_PASSWORD = "password123"

CLASS_TITLES = ["Mathematics 101", "Physics 201", "Chemistry 301", "Biology 101", "Computer Science 101"]
ASSIGNMENT_TITLES = [
    "Homework 1", "Quiz 1", "Midterm Project", "Lab Report 1", "Final Essay",
    "Problem Set 2", "Research Paper", "Group Project", "Lab Experiment", "Case Study",
]


def get_or_create_user(name: str, email: str, role: str, password_hash: str):
    user = get_user_by_email(email)
    if user:
        return user
    return create_user(name=name, email=email, password_hash=password_hash, role=role)


def seed_users(password_hash: str):
    get_or_create_user("System Administrator", "admin@demo.com", "admin", password_hash)
    teachers = [
        get_or_create_user(f"Teacher {i}", f"teacher{i}@demo.com", "teacher", password_hash)
        for i in range(1, 4)
    ]
    students = [
        get_or_create_user(f"Student {i}", f"student{i}@demo.com", "student", password_hash)
        for i in range(1, 16)
    ]
    logger.info("Seeded %d teachers and %d students", len(teachers), len(students))
    return teachers, students


def seed_classes(teachers, students):
    classes = []
    for i, title in enumerate(CLASS_TITLES):
        code = f"CLASS{i + 1}"
        class_doc = get_class_by_code(code)
        if not class_doc:
            class_doc = add_class(
                {"title": title, "code": code, "description": f"Description for {title}"},
                teachers[i % len(teachers)]["id"],
            )
            for student in random.sample(students, random.randint(3, 10)):
                class_doc = add_member(class_doc, student["id"])
        classes.append(class_doc)
    logger.info("Seeded %d classes", len(classes))
    return classes


def seed_assignments(classes):
    assignments = []
    for i, title in enumerate(ASSIGNMENT_TITLES):
        class_doc = classes[i % len(classes)]
        existing = [a for a in get_assignments_by_class(class_doc["id"]) if a["title"] == title]
        if existing:
            assignments.append(existing[0])
            continue

        due_at = datetime.now(timezone.utc) + timedelta(days=random.randint(1, 30))
        assignments.append(add_assignment({
            "class_id": class_doc["id"],
            "title": title,
            "description": f"Description for {title}",
            "due_at": to_iso(due_at),
            "created_by": class_doc["teacher_id"],
            "max_score": 100,
        }))
    logger.info("Seeded %d assignments", len(assignments))
    return assignments


def seed_submissions(assignments, classes):
    members_by_class = {
        class_doc["id"]: [m["user_id"] for m in class_doc.get("members", []) if m.get("role_in_class") == "student"]
        for class_doc in classes
    }

    created = 0
    for assignment in assignments:
        student_ids = members_by_class.get(assignment["class_id"], [])
        # 60-90% of the class submits
        submitting = random.sample(student_ids, int(len(student_ids) * random.uniform(0.6, 0.9)))
        for student_id in submitting:
            if get_submission_for_student(assignment["id"], student_id):
                continue

            submission = save_submission(
                assignment["id"],
                student_id,
                [{"type": "link", "value": f"https://example.com/{assignment['id']}/{student_id}"}],
                "submitted",
            )
            if random.random() > 0.3:
                grade_submission(submission, score=random.randint(60, 100), max_score=100,
                                 feedback="Good work! Keep it up.")
            created += 1
    logger.info("Seeded %d submissions", created)


def seed_database():
    password_hash = hash_password(DEMO_PASSWORD)
    teachers, students = seed_users(password_hash)
    classes = seed_classes(teachers, students)
    assignments = seed_assignments(classes)
    seed_submissions(assignments, classes)
    logger.info("Database seeded. Log in as admin@demo.com, teacher1@demo.com or student1@demo.com")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    seed_database()
