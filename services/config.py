"""
Constants for the auth and storage services
"""
from datetime import timedelta

# Process-level settings (secret, database, CORS) live in config/configrations.py

# Token Configuration
ALGORITHM = "HS256"
TOKEN_TTL = timedelta(hours=24)  # Every issued token expires after 24 hours
BEARER_SCHEME = "Bearer"

# Password hashing
BCRYPT_ROUNDS = 12

# Push key configuration
PUSH_CHARS = "-0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ_abcdefghijklmnopqrstuvwxyz"
PUSH_TIME_CHARS = 8
PUSH_RANDOM_CHARS = 12

# Document store layout
VALUE_FIELD = "_value"  # Wraps non-object values stored directly as a document
FORBIDDEN_KEY_CHARS = set(".$#[]")

# Collection names
USERS = "users"
EMPLOYEES = "employees"
ATTENDANCE = "attendance"

DEFAULT_ROLE = "user"
DEFAULT_ATTENDANCE_STATUS = "present"
