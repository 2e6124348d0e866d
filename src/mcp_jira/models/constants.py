"""
Constants and default values for model conversions.

This module centralizes all default values and fallbacks used when
converting Jira API responses to models.
"""

# Common defaults
EMPTY_STRING = ""
UNKNOWN = "Unknown"
UNASSIGNED = "Unassigned"

# Jira defaults
JIRA_DEFAULT_ID = "0"
JIRA_DEFAULT_KEY = "UNKNOWN-0"
JIRA_DEFAULT_STATUS_CATEGORY = "undefined"

# Normalized lifecycle buckets returned in status.statusCategory.key
JIRA_STATUS_CATEGORY_KEYS = ("new", "indeterminate", "done", "undefined")

# Sprint states accepted from the Agile API; anything else maps to "future"
JIRA_SPRINT_STATES = ("active", "closed", "future")
JIRA_DEFAULT_SPRINT_STATE = "future"

# Custom field ids that commonly hold story points, checked in order
STORY_POINTS_FIELD_CANDIDATES = (
    "customfield_10016",  # Most common in Jira Cloud
    "customfield_10026",
    "customfield_10028",
    "customfield_10034",
)

# Custom field ids that commonly hold the sprint list, checked in order
SPRINT_FIELD_CANDIDATES = (
    "customfield_10020",  # Most common in Jira Cloud
    "customfield_10007",
    "customfield_10104",
)
