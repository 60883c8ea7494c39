"""Event type constants."""


class EventTypes:
    """Event type string constants"""

    # adoption
    COMPANION_ADOPTED = "companion_adopted"
    COMPANION_RETIRED = "companion_retired"

    # care
    COMPANION_CARED = "companion_cared"
    COMPANION_LEVELED_UP = "companion_leveled_up"

    # editing / admin
    COMPANION_UPDATED = "companion_updated"
    COMPANION_DELETED = "companion_deleted"
