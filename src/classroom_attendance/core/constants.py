"""Constants and defaults.

Note: Keep constants here to avoid magic strings spread across code.
"""

# Local cache key conventions. Must stay bit-exact for data already persisted.
LOCAL_STUDENTS_PREFIX = "local_students_"
ATTENDANCE_PREFIX = "attendance_"

# Placeholder ids handed out when a record could not be created remotely.
LOCAL_ID_PREFIX = "local-"
LOCAL_ID_MARKERS = ("local-", "temp-")
REMOTE_ID_PATTERN = r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$"

# MySQL error numbers surfaced through RemoteError.code
ER_DUP_ENTRY = 1062
ER_NO_REFERENCED_ROW_2 = 1452
CR_CONN_HOST_ERROR = 2003

DATE_FORMAT = "%Y-%m-%d"

STANDARD_ROSTER = (
    ("Aarav", "Sharma", "aarav.sharma@niet.ac.in"),
    ("Priya", "Patel", "priya.patel@niet.ac.in"),
    ("Rahul", "Kumar", "rahul.kumar@niet.ac.in"),
    ("Ananya", "Verma", "ananya.verma@niet.ac.in"),
    ("Kunal", "Mehra", "kunal.mehra@niet.ac.in"),
    ("Ishita", "Singh", "ishita.singh@niet.ac.in"),
    ("Arjun", "Reddy", "arjun.reddy@niet.ac.in"),
    ("Neha", "Gupta", "neha.gupta@niet.ac.in"),
    ("Rohan", "Joshi", "rohan.joshi@niet.ac.in"),
)
