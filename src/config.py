"""Configuration module for the flashcard backend.

This module provides centralized configuration management, including directory
paths, database and API server settings, and authentication defaults.
All configuration values can be overridden via environment variables.
"""

import os
from pathlib import Path
from typing import List

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# --- Directory Configuration ---

# Root directory of the project
ROOT_DIR = Path(__file__).parent.parent.resolve()

# Data directory name
DATA_DIR_NAME = "data"
DATA_DIR = ROOT_DIR / DATA_DIR_NAME

# --- Database Configuration ---

# SQLite by default; any SQLAlchemy URL works (e.g. mysql+pymysql://...)
DATABASE_URL: str = os.getenv("DATABASE_URL", f"sqlite:///{DATA_DIR}/flashcards.db")

# --- API Server Configuration ---

API_HOST: str = os.getenv("API_HOST", "0.0.0.0")
API_PORT: int = int(os.getenv("API_PORT", "3000"))

# CORS allowed origins (comma-separated list)
_CORS_ALLOWED_ORIGINS_STR: str = os.getenv(
    "CORS_ALLOWED_ORIGINS",
    "http://localhost:5173,http://127.0.0.1:5173,http://localhost:3000,"
    "http://127.0.0.1:3000",
)
CORS_ALLOWED_ORIGINS: List[str] = [
    origin.strip()
    for origin in _CORS_ALLOWED_ORIGINS_STR.split(",")
    if origin.strip()
]

# --- Logging Configuration ---

LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

# --- Authentication Configuration ---

JWT_SECRET_KEY: str = os.getenv("JWT_SECRET_KEY", "your-secret-key-change-in-production")
JWT_ALGORITHM: str = os.getenv("JWT_ALGORITHM", "HS256")

# 30 days
ACCESS_TOKEN_EXPIRE_MINUTES: int = int(
    os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(60 * 24 * 30))
)

# Bcrypt rounds for password hashing (higher = more secure but slower)
BCRYPT_ROUNDS: int = int(os.getenv("BCRYPT_ROUNDS", "12"))

# --- Roles & Visibility Configuration ---

ROLE_STUDENT = "student"
ROLE_TEACHER = "teacher"
ROLES: List[str] = [ROLE_STUDENT, ROLE_TEACHER]

# Class scope that makes a teacher's card visible to every one of their classes
ALL_CLASSES_SCOPE = "ALL"

# Guardian id of a student that is not assigned to any teacher
UNASSIGNED_GUARDIAN_ID = 0

# Maximum number of rows returned by the student search
STUDENT_SEARCH_LIMIT: int = int(os.getenv("STUDENT_SEARCH_LIMIT", "10"))

# Largest value an integer primary key can hold (signed 64-bit)
MAX_ROW_ID = 2**63 - 1
