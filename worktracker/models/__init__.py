from worktracker.models.holiday import PersonalHoliday, PublicHoliday
from worktracker.models.user import User
from worktracker.models.work_entry import LocationEntry, WorkEntry

__all__ = ["LocationEntry", "PersonalHoliday", "PublicHoliday", "User", "WorkEntry"]
