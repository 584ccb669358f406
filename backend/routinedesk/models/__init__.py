from routinedesk.models.attendance import AttendanceLog, AttendanceStatus  # noqa: F401
from routinedesk.models.program import Program, ProgramType, SemesterSystem  # noqa: F401
from routinedesk.models.room import Room, RoomType  # noqa: F401
from routinedesk.models.routine import RoutineVersion, ScheduleOverride  # noqa: F401
from routinedesk.models.schedule_log import ScheduleLog  # noqa: F401
from routinedesk.models.section import CourseSection, CourseType  # noqa: F401
from routinedesk.models.semester import SemesterConfiguration  # noqa: F401
from routinedesk.models.time_slot import DefaultTimeSlot, SlotType  # noqa: F401
