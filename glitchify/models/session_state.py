from enum import Enum


class SessionState(str, Enum):
    EMPTY = "empty"      # no image loaded
    LOADED = "loaded"    # original == current, fresh load or reset
    EDITED = "edited"    # at least one effect or history step applied
