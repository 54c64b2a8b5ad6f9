"""
Reset the catalog to a demo data set

Usage: python -m coursehub.seed
"""

import random
from datetime import datetime

from bson import ObjectId
from pymongo import MongoClient

from coursehub.config import MONGO_URL, DATABASE_NAME

CATEGORIES = [
    "Programming",
    "Web Development",
    "Data Science",
    "Machine Learning",
    "Cybersecurity",
    "Graphic Design",
    "Business & Finance",
    "Marketing",
    "Mobile Development",
    "UI/UX Design",
]

SAMPLE_VIDEO = "https://www.youtube.com/embed/dQw4w9WgXcQ"

SAMPLE_LESSONS = [
    ("Introduction to the Course", "5:30"),
    ("Getting Started - Setup", "12:15"),
    ("Core Concepts Explained", "18:45"),
    ("Hands-on Practice", "22:00"),
    ("Advanced Techniques", "15:30"),
    ("Building a Project", "35:00"),
    ("Best Practices", "10:20"),
    ("Final Project & Wrap Up", "25:00"),
]

COURSES = [
    {"title": "React for Beginners", "short_description": "Master React.js fundamentals", "price": 499,
     "instructor": {"name": "Rahul Sharma", "bio": "Senior Frontend Developer with 8+ years experience"},
     "level": "Beginner", "duration": "8 hours", "rating": 4.8, "enrolled_count": 2450,
     "description": "Learn React step-by-step and build modern web applications with components, state and hooks."},
    {"title": "Python Zero to Hero", "short_description": "Complete Python programming", "price": 599,
     "instructor": {"name": "Priya Patel", "bio": "Data Scientist at Tech Corp"},
     "level": "Beginner", "duration": "12 hours", "rating": 4.7, "enrolled_count": 3200,
     "description": "Master Python with real-world coding exercises, from basics to OOP, file handling and web scraping."},
    {"title": "Machine Learning Bootcamp", "short_description": "AI & ML fundamentals", "price": 899,
     "instructor": {"name": "Dr. Arun Kumar", "bio": "AI Researcher and Professor"},
     "level": "Advanced", "duration": "20 hours", "rating": 4.9, "enrolled_count": 1890,
     "description": "Understand ML algorithms and build predictive models: regression, classification, clustering."},
    {"title": "UI/UX Design Masterclass", "short_description": "Design beautiful interfaces", "price": 699,
     "instructor": {"name": "Sneha Gupta", "bio": "Lead Designer at Creative Studio"},
     "level": "Intermediate", "duration": "10 hours", "rating": 4.6, "enrolled_count": 1560,
     "description": "User research, wireframing, prototyping and visual design for web and mobile products."},
    {"title": "Full-Stack JavaScript", "short_description": "Full-stack web development", "price": 999,
     "instructor": {"name": "Vikram Singh", "bio": "Full-Stack Architect at StartupX"},
     "level": "Intermediate", "duration": "25 hours", "rating": 4.8, "enrolled_count": 2100,
     "description": "Build complete web applications with a JavaScript frontend, a REST backend and a document database."},
    {"title": "Cybersecurity Fundamentals", "short_description": "Protect digital assets", "price": 799,
     "instructor": {"name": "Amit Verma", "bio": "Certified Ethical Hacker"},
     "level": "Intermediate", "duration": "15 hours", "rating": 4.7, "enrolled_count": 980,
     "description": "Threat models, network security, cryptography basics and secure coding practices."},
    {"title": "Digital Marketing Expert Course", "short_description": "Grow your online presence", "price": 499,
     "instructor": {"name": "Neha Kapoor", "bio": "Marketing Director at AdAgency"},
     "level": "Beginner", "duration": "8 hours", "rating": 4.5, "enrolled_count": 1750,
     "description": "SEO, social media, content and paid campaigns for growing an audience online."},
    {"title": "Android Development Using Kotlin", "short_description": "Build Android apps", "price": 899,
     "instructor": {"name": "Karthik Rajan", "bio": "Senior Android Developer"},
     "level": "Intermediate", "duration": "18 hours", "rating": 4.6, "enrolled_count": 1320,
     "description": "Create native Android applications with Kotlin, Jetpack libraries and modern architecture."},
    {"title": "Data Analysis with Pandas", "short_description": "Analyze data like a pro", "price": 549,
     "instructor": {"name": "Ananya Reddy", "bio": "Data Analyst at BigData Inc"},
     "level": "Intermediate", "duration": "10 hours", "rating": 4.7, "enrolled_count": 890,
     "description": "Clean, transform and visualise data sets with pandas and friends."},
    {"title": "Advanced Node.js", "short_description": "Scale Node.js apps", "price": 799,
     "instructor": {"name": "Suresh Menon", "bio": "Backend Architect"},
     "level": "Advanced", "duration": "14 hours", "rating": 4.8, "enrolled_count": 760,
     "description": "Streams, clustering, performance profiling and production patterns for Node.js services."},
]

SAMPLE_REVIEWS = [
    ("Student A", 5, "Excellent course! Highly recommended."),
    ("Student B", 4, "Very informative and well-structured."),
]


def build_course(template: dict, category_id: ObjectId) -> dict:
    now = datetime.utcnow()
    return {
        **template,
        "thumbnail": f"https://picsum.photos/seed/{ObjectId()}/400/300",
        "category": category_id,
        "lessons": [
            {"_id": ObjectId(), "title": title, "video_url": SAMPLE_VIDEO, "duration": duration, "order": order}
            for order, (title, duration) in enumerate(SAMPLE_LESSONS, start=1)
        ],
        "reviews": [
            {"_id": ObjectId(), "user": None, "user_name": name, "rating": rating, "comment": comment, "date": now}
            for name, rating, comment in SAMPLE_REVIEWS
        ],
        "created_at": now,
    }


def seed(db) -> dict:
    db.categories.delete_many({})
    db.courses.delete_many({})

    result = db.categories.insert_many([{"name": name} for name in CATEGORIES])
    category_ids = result.inserted_ids

    courses = [build_course(c, random.choice(category_ids)) for c in COURSES]
    db.courses.insert_many(courses)

    return {"categories": len(category_ids), "courses": len(courses)}


if __name__ == "__main__":
    client = MongoClient(MONGO_URL)
    counts = seed(client[DATABASE_NAME])
    print(f"✅ Seeded {counts['categories']} categories and {counts['courses']} courses")
