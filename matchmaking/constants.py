"""
Shared constants used across the matching program.
"""

# Canonical scheduling slots, in canonical order
SLOT_LABELS = [
    "Weekday Lunch",
    "Weekday Dinner",
    "Weekend Lunch",
    "Weekend Dinner",
]

# Experience bands, lowest first (rank = index + 1)
EXPERIENCE_BANDS = [
    "0-3 years",
    "4-7 years",
    "8-15 years",
    "15+ years",
    "Judicial Officer",
]

# Group sizing
TARGET_GROUP_SIZE = 4
MIN_GROUP_SIZE = 2

# A slot with fewer primary-preference members than this gets backfilled
# from participants who list it as a secondary preference
BACKFILL_THRESHOLD = 3
