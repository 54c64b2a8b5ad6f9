"""
Create (or promote) an admin account

Usage: python -m coursehub.create_admin EMAIL PASSWORD [--name NAME]
"""

import argparse
from datetime import datetime

from pymongo import MongoClient

from coursehub.auth.auth_utils import hash_password
from coursehub.config import MONGO_URL, DATABASE_NAME, MIN_PASSWORD_LENGTH


def create_admin(db, email: str, password: str, name: str = "Admin") -> bool:
    """Returns True when a new user was inserted, False when an existing one was promoted"""
    result = db.users.update_one(
        {"email": email},
        {
            "$set": {"is_admin": True, "password": hash_password(password)},
            "$setOnInsert": {
                "name": name,
                "email": email,
                "my_courses": [],
                "completed_lessons": [],
                "created_at": datetime.utcnow(),
            },
        },
        upsert=True,
    )
    return result.upserted_id is not None


def main(argv=None):
    parser = argparse.ArgumentParser(description="Create or promote a CourseHub admin")
    parser.add_argument("email")
    parser.add_argument("password")
    parser.add_argument("--name", default="Admin")
    args = parser.parse_args(argv)

    if len(args.password) < MIN_PASSWORD_LENGTH:
        parser.error(f"password must be at least {MIN_PASSWORD_LENGTH} characters")

    client = MongoClient(MONGO_URL)
    created = create_admin(client[DATABASE_NAME], args.email, args.password, args.name)
    print(f"✅ Admin {'created' if created else 'promoted'}: {args.email}")


if __name__ == "__main__":
    main()
