import os
from dotenv import load_dotenv
from pathlib import Path


env_path = Path(".") / ".env"
load_dotenv(dotenv_path=env_path)


class Config:
    # Session token signing secret. No default: create_app refuses to start without it,
    # a regenerated secret would invalidate every token issued before a restart.
    JWT_SECRET_KEY = os.environ.get("JWT_SECRET_KEY")
    JWT_ALGORITHM = "HS256"
    ACCESS_TOKEN_EXPIRE_SEC = int(os.environ.get("ACCESS_TOKEN_EXPIRE_SEC", 3600))  # 1 hour
    INVITE_TOKEN_EXPIRE_SEC = int(os.environ.get("INVITE_TOKEN_EXPIRE_SEC", 604800))  # 7 days

    DEBUG = os.environ.get("DEBUG", "False").lower() == "true"
    TESTING = False
    LOG_DIR = os.environ.get("LOG_DIR", "logs")

    # MongoDB
    MONGODB_URI = os.environ.get("MONGODB_URI", "mongodb://localhost:27017/hoptrip")
    MONGODB_DB_NAME = os.environ.get("MONGODB_DB_NAME", "hoptrip")
    MONGODB_MAX_POOL_SIZE = int(os.environ.get("MONGODB_MAX_POOL_SIZE", 50))
    MONGODB_MIN_POOL_SIZE = int(os.environ.get("MONGODB_MIN_POOL_SIZE", 5))
    MONGODB_SERVER_SELECTION_TIMEOUT_MS = int(os.environ.get("MONGODB_SERVER_SELECTION_TIMEOUT_MS", 5000))
    MONGODB_CONNECT_TIMEOUT_MS = int(os.environ.get("MONGODB_CONNECT_TIMEOUT_MS", 10000))
    # Ping + create indexes while building the app
    MONGODB_INIT_ON_STARTUP = os.environ.get("MONGODB_INIT_ON_STARTUP", "True").lower() == "true"

    # Google OAuth Configuration
    GOOGLE_CLIENT_ID = os.environ.get("GOOGLE_CLIENT_ID")

    # Google Places (place lookup)
    GOOGLE_PLACES_API_KEY = os.environ.get("GOOGLE_PLACES_API_KEY")
    GOOGLE_PLACES_PHOTO_MAX_WIDTH = int(os.environ.get("GOOGLE_PLACES_PHOTO_MAX_WIDTH", 400))

    # Fixed timeout for every outbound call (places, identity provider)
    EXTERNAL_TIMEOUT_SEC = int(os.environ.get("EXTERNAL_TIMEOUT_SEC", 10))

    MAIL_SERVER = os.environ.get("MAIL_SERVER", "smtp.gmail.com")
    MAIL_PORT = int(os.environ.get("MAIL_PORT", 587))
    MAIL_USE_TLS = True
    MAIL_USE_SSL = False
    MAIL_USERNAME = os.environ.get("MAIL_USERNAME")
    MAIL_PASSWORD = os.environ.get("MAIL_PASSWORD")
    MAIL_DEFAULT_SENDER = os.environ.get("MAIL_DEFAULT_SENDER") or MAIL_USERNAME
    MAIL_SUBJECT_PREFIX = "[HopTrip]"

    # Used to build links in invitation emails
    PUBLIC_BASE_URL = os.environ.get("PUBLIC_BASE_URL", "http://localhost:8000")

    # Trip search
    SEARCH_RESULT_LIMIT = 20
