from salonbook.models.staff import Staff
from salonbook.models.service import BasketItem, Service, StaffService
from salonbook.models.booking import Booking
from salonbook.models.schedule_block import ScheduleBlock

__all__ = [
    "Staff",
    "Service",
    "StaffService",
    "BasketItem",
    "Booking",
    "ScheduleBlock",
]
