"""Demo data for a fresh installation."""
from __future__ import annotations

import logging
import random
from datetime import date
from typing import Optional

from .container import Container
from .core.enums import AttendanceStatus

logger = logging.getLogger(__name__)

DEMO_CLASSES = (
    ("Mathematics 101", "Introduction to Calculus - NIET Engineering Department", "MWF 9:00 AM - 10:30 AM"),
    ("Physics 201", "Classical Mechanics - NIET Science Department", "TTh 1:00 PM - 2:30 PM"),
    ("Computer Science 301", "Data Structures and Algorithms - NIET Computer Science Department", "MWF 2:00 PM - 3:30 PM"),
)

DEMO_STUDENTS = (
    ("Aarav", "Sharma"),
    ("Priya", "Nair"),
    ("Rohan", "Mehta"),
    ("Ananya", "Verma"),
    ("Kunal", "Iyer"),
)


def initialize_demo_data(
    container: Container,
    user_id: str,
    *,
    today: Optional[date] = None,
    rng: Optional[random.Random] = None,
) -> bool:
    """Create demo classes, students and today's marks unless the user already has classes."""

    if container.class_service.list_classes(user_id):
        return False

    today = today or date.today()
    rng = rng or random.Random()
    statuses = list(AttendanceStatus)

    for name, description, schedule in DEMO_CLASSES:
        cls = container.class_service.create_class(
            name=name,
            description=description,
            schedule=schedule,
            user_id=user_id,
        )
        for first_name, last_name in DEMO_STUDENTS:
            student = container.student_service.create_student(
                first_name=first_name,
                last_name=last_name,
                email=f"{first_name.lower()}.{last_name.lower()}@niet.ac.in",
                class_id=cls.class_id,
            )
            container.attendance_service.mark_attendance(student.ref, cls.class_id, today, rng.choice(statuses))

    logger.info("Demo data created for user %s", user_id)
    return True
