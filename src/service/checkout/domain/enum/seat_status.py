from enum import StrEnum


class SeatStatus(StrEnum):
    AVAILABLE = 'available'
    LOCKED = 'locked'
    SOLD = 'sold'
    UNAVAILABLE = 'unavailable'
