"""Shared application constants.

Centralizes the values the schedule grid and the statistics code agree on so
we can document and adjust them in one place.
"""

# Pixels per hour on the day grid
HOUR_HEIGHT = 80

# The day grid starts at 05:00; earlier hours render at the bottom
DAY_START_HOUR = 5

# Shortest event drawn on the grid, in minutes
MIN_EVENT_MINUTES = 15

# Epley divisor: 1RM = weight * (1 + reps / EPLEY_DIVISOR)
EPLEY_DIVISOR = 30

# Trailing window for "recent PR" entries
RECENT_PR_DAYS = 30

# Days between workouts that still continue a streak (one rest day)
STREAK_MAX_GAP_DAYS = 2

# Two-window trend thresholds as fractions of the older window's mean.
# Half-split (nutrition, sleep): +/-5%
HALF_SPLIT_TOLERANCE = 0.05
# Recent 3 sessions vs prior 3 (estimated 1RM): +/-2%
SESSION_WINDOW = 3
SESSION_TOLERANCE = 0.02
# Recent 2 entries vs prior 2 (body weight): +/-0.5%
WEIGHT_WINDOW = 2
WEIGHT_TOLERANCE = 0.005

# A day counts toward nutrition compliance at 90% of target
COMPLIANCE_FRACTION = 0.9

MEAL_TYPE_NAMES = {
    "breakfast": "Breakfast",
    "lunch": "Lunch",
    "dinner": "Dinner",
    "snack": "Snack",
    "dessert": "Dessert",
}
