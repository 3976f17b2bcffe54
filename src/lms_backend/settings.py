import os
import threading
from dotenv import load_dotenv

load_dotenv()

def _postgres_url() -> str:
    user = os.environ.get("POSTGRES_USER", "postgres")
    password = os.environ.get("POSTGRES_PASSWORD", "postgres")
    host = os.environ.get("POSTGRES_URL", "localhost:5432")
    database = os.environ.get("POSTGRES_DB", "lms")
    return f"postgresql://{user}:{password}@{host}/{database}"

class BackendSettings:
    _instance = None
    _lock = threading.Lock()

    def __init__(self):
        self.DEBUG_MODE = os.environ.get("DEBUG_MODE","development")
        self.LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()
        self.DATABASE_URL = os.environ.get("DATABASE_URL") or _postgres_url()

        # Sessions
        self.SESSION_TTL_MINUTES = int(os.environ.get("SESSION_TTL_MINUTES", "10080"))
        self.SESSION_COOKIE_NAME = os.environ.get("SESSION_COOKIE_NAME", "session_token")
        self.BCRYPT_ROUNDS = int(os.environ.get("BCRYPT_ROUNDS", "12"))

        # Permission cache, 0 disables it
        self.PERMISSION_CACHE_TTL = int(os.environ.get("PERMISSION_CACHE_TTL", "10"))
        self.REDIS_HOST = os.environ.get("REDIS_HOST")
        self.REDIS_PORT = int(os.environ.get("REDIS_PORT", "6379"))
        self.REDIS_PASSWORD = os.environ.get("REDIS_PASSWORD")

        # Bootstrap admin
        self.ADMIN_EMAIL = os.environ.get("ADMIN_EMAIL", "admin@example.com")
        self.ADMIN_PASSWORD = os.environ.get("ADMIN_PASSWORD")
        self.ADMIN_NAME = os.environ.get("ADMIN_NAME", "Admin")

    def __new__(cls):
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = super(BackendSettings, cls).__new__(cls)
        return cls._instance

settings = BackendSettings()
