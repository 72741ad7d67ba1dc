from pydantic import BaseModel


class DashboardSummaryOut(BaseModel):
    faculty_count: int
    classroom_count: int
    available_classroom_count: int
    course_count: int
    pending_absence_count: int
    today_class_count: int
    today: str
