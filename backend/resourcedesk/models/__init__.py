from resourcedesk.models.classroom import Classroom  # noqa: F401
from resourcedesk.models.course import Course  # noqa: F401
from resourcedesk.models.department import Department  # noqa: F401
from resourcedesk.models.faculty import Faculty  # noqa: F401
from resourcedesk.models.faculty_absence import FacultyAbsence  # noqa: F401
from resourcedesk.models.reallocation_log import ReallocationLog  # noqa: F401
from resourcedesk.models.section import Section  # noqa: F401
from resourcedesk.models.time_slot import TimeSlot  # noqa: F401
from resourcedesk.models.timetable_entry import TimetableEntry  # noqa: F401
