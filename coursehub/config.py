"""
CourseHub Configuration
Database, token and catalog settings
"""

import os

# MongoDB
MONGO_URL = os.getenv("MONGO_URL", "mongodb://localhost:27017")
DATABASE_NAME = os.getenv("DATABASE_NAME", "coursehub_db")

# Bearer tokens
JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "dev-secret-change-me")
JWT_ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_DAYS = int(os.getenv("ACCESS_TOKEN_EXPIRE_DAYS", "7"))

# Password hashing
BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", "10"))
MIN_PASSWORD_LENGTH = 6

# When true, enrolled_count only moves if the user's course list actually changed
STRICT_ENROLLMENT_COUNT = os.getenv("STRICT_ENROLLMENT_COUNT", "false").lower() in ("1", "true", "yes")

# Catalog
POPULAR_COURSES_LIMIT = 6
DEFAULT_PAGE_SIZE = 12
MAX_PAGE_SIZE = 100
MAX_PAGE_NUMBER = 10000

# Server
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
VERSION = os.getenv("VERSION")
PORT = int(os.getenv("PORT", "5000"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Client tier
API_URL = os.getenv("API_URL", "http://localhost:5000")
