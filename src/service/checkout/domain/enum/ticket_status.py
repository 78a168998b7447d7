from enum import StrEnum


class TicketStatus(StrEnum):
    VALID = 'valid'
    CHECKED_IN = 'checked_in'
    VOIDED = 'voided'
    RESOLD = 'resold'
