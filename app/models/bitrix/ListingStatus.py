import enum


class ListingStatus(str, enum.Enum):
    PUBLISHED = "PUBLISHED"
    LIVE = "LIVE"
    DRAFT = "DRAFT"
