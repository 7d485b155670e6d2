from enum import Enum


class UserRole(str, Enum):
    CLIENT = "client"
    COMPANY_ADMIN = "company_admin"
    PLATFORM_ADMIN = "platform_admin"

    def __str__(self):
        return self.value


class QuoteStatus(str, Enum):
    DRAFT = "draft"
    SUBMITTED = "submitted"
    REVISED = "revised"
    WITHDRAWN = "withdrawn"

    def __str__(self):
        return self.value


class StaffingRole(str, Enum):
    PARAMEDIC = "paramedic"
    EMT = "emt"
    FIRST_AIDER = "first_aider"
    NURSE = "nurse"
    DOCTOR = "doctor"
    OTHER = "other"

    def __str__(self):
        return self.value


class EventType(str, Enum):
    CONSTRUCTION = "construction"
    FESTIVALS = "festivals"
    MOTORSPORT = "motorsport"
    SPORTS = "sports"
    FAIRS_SHOWS = "fairs_shows"
    CORPORATE = "corporate"
    PRIVATE_EVENTS = "private_events"
    OTHER = "other"

    def __str__(self):
        return self.value


class SortMode(str, Enum):
    BEST_VALUE = "best_value"
    PRICE_LOW = "price_low"
    PRICE_HIGH = "price_high"
    RATING = "rating"
    RECENT = "recent"

    def __str__(self):
        return self.value


class SourceProvenance(str, Enum):
    SELF_SOURCED = "self_sourced"
    MARKETPLACE_SOURCED = "marketplace_sourced"

    def __str__(self):
        return self.value


class FeePolicy(str, Enum):
    SUBSCRIPTION = "subscription"
    MARKETPLACE_COMMISSION = "marketplace_commission"
    CO_SHARE_BLENDED = "co_share_blended"

    def __str__(self):
        return self.value


class AttributionLifecycle(str, Enum):
    SOLO = "solo"
    PASS_ON_PENDING = "pass_on_pending"
    PASS_ON_ACCEPTED = "pass_on_accepted"
    PASS_ON_DECLINED = "pass_on_declined"

    def __str__(self):
        return self.value


class PassOnAction(str, Enum):
    ACCEPT = "accept"
    DECLINE = "decline"

    def __str__(self):
        return self.value


class CancelledBy(str, Enum):
    CLIENT = "client"
    COMPANY = "company"

    def __str__(self):
        return self.value


class RaterType(str, Enum):
    CLIENT = "client"
    COMPANY = "company"

    def __str__(self):
        return self.value
