"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_HISTORY_DAYS = 30
DEFAULT_LOG_LIMIT = 50
DEFAULT_DEFAULTER_THRESHOLD = 75
DEFAULT_SUBJECT_CREDITS = 3
PROXY_ALERT_RECENT_LIMIT = 5

# Snapshot shown on the admin dashboard; there is no metrics pipeline behind it.
SYSTEM_KPIS = {
    "automatedEntries": 87,
    "avgMarkingTime": 2.3,
    "proxyFailsCaught": 12,
    "systemUptime": 99.8,
}

SAMPLE_DEFAULTERS = (
    {"studentId": "1", "name": "Shivam Mishra", "percentage": 45, "missedClasses": 12},
    {"studentId": "2", "name": "Rajesh Kumar", "percentage": 52, "missedClasses": 10},
    {"studentId": "3", "name": "Priya Sharma", "percentage": 58, "missedClasses": 8},
)

DEMO_STUDENTS = (
    ("CS001", "Mohammad Zaid", "CS"),
    ("CS002", "Mohammad Shoaib", "CS"),
    ("CS003", "Shivam Mishra", "CS"),
    ("CS004", "Shubham Pal", "CS"),
    ("CS005", "Umra Hashmi", "CS"),
    ("CS006", "Arshad Khan", "CS"),
)
