"""Event type constants published on the EventBus."""


class EventTypes:
    """Event type string constants"""

    # attitude
    ATTITUDE_CHANGED = "attitude_changed"
    ATTITUDE_MEMORY_RECORDED = "attitude_memory_recorded"

    # person directory
    PERSON_DETECTED = "person_detected"
    PERSON_MENTIONED = "person_mentioned"
    PERSON_MEMORY_RECORDED = "person_memory_recorded"

    # interactions
    INTERACTION_PLANNED = "interaction_planned"
    INTERACTION_COMPLETED = "interaction_completed"
