"""
User document model.

Maps to the `users` collection, keyed by userId.

The record is enriched progressively: identity fields at creation, then
demographic (name, city, state) and academic (class, stream, subject data)
fields through profile updates. testGroup is derived from studentClass and
is never written directly by clients.

testCompleted / paymentDone / reportReady / aiMessagesUsed belong to the test
engine, payment and report flows; this service only initialises them.
"""

from __future__ import annotations

from enum import Enum
from typing import ClassVar, Optional, Union

from schemas.models.base import RecordModel


class StudentClass(str, Enum):
    class_8 = "8th"
    class_9 = "9th"
    class_10 = "10th"
    class_11 = "11th"
    class_12 = "12th"


class Stream(str, Enum):
    science = "Science"
    commerce = "Commerce"
    arts = "Arts"
    undecided = "Not decided yet"


class TestGroup(str, Enum):
    college = "college"
    school = "school"


COLLEGE_CLASSES = frozenset({StudentClass.class_11.value, StudentClass.class_12.value})


def derive_test_group(student_class: Optional[str]) -> Optional[str]:
    """Return the testGroup implied by *student_class*.

    11th and 12th sit the college test, every other class the school test.
    An unset class leaves the group unset.
    """
    if not student_class:
        return None
    value = student_class.value if isinstance(student_class, Enum) else student_class
    if value in COLLEGE_CLASSES:
        return TestGroup.college.value
    return TestGroup.school.value


class UserDoc(RecordModel):
    """Document model for the `users` collection."""

    key_field: ClassVar[str] = "user_id"

    user_id: str
    mobile: Optional[str] = None
    email: Optional[str] = None
    auth_provider: str

    first_name: Optional[str] = None
    last_name: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    student_class: Optional[StudentClass] = None
    test_group: Optional[TestGroup] = None
    stream: Optional[Stream] = None
    subject_performance: dict[str, str] = {}
    subject_ratings: dict[str, Union[int, float]] = {}

    test_completed: bool = False
    payment_done: bool = False
    report_ready: bool = False
    ai_messages_used: int = 0

    created_at: str
    updated_at: str
