import os


def _get_bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}

APP_ENV = os.environ.get("APP_ENV", "development")
IS_PRODUCTION = APP_ENV.lower() == "production"

DATABASE_URL = os.environ.get("DATABASE_URL", "sqlite:///./campus_issues.db")
AUTO_MIGRATE = _get_bool(os.environ.get("AUTO_MIGRATE"), default=False)

FRONTEND_URL = os.environ.get("FRONTEND_URL", "http://localhost:5173")

CORS_ORIGINS = [
    FRONTEND_URL,
]

API_PREFIX = os.environ.get("API_PREFIX", "/api")

ACCESS_TOKEN_EXPIRE_TIME = int(os.environ.get("ACCESS_TOKEN_EXPIRE_TIME", 60 * 24 * 30)) # in minutes

### Hashing
SECRET_KEY = os.environ.get("SECRET_KEY", "change-me") # if you don't have one, you can generate one using `openssl rand -hex 32` in cmd
ENCRYPTION_ALGORITHM = "HS256"

### Default admin account, created on startup when both values are set
ADMIN_EMAIL = os.environ.get("ADMIN_EMAIL")
ADMIN_PASSWORD = os.environ.get("ADMIN_PASSWORD")
ADMIN_NAME = os.environ.get("ADMIN_NAME", "Administrator")

### Image host
CLOUDINARY_CLOUD_NAME = os.environ.get("CLOUDINARY_CLOUD_NAME", "")
CLOUDINARY_API_KEY = os.environ.get("CLOUDINARY_API_KEY", "")
CLOUDINARY_API_SECRET = os.environ.get("CLOUDINARY_API_SECRET", "")
UPLOAD_FOLDER = os.environ.get("UPLOAD_FOLDER", "campus-issues")
MAX_UPLOAD_SIZE = 5 * 1024 * 1024 # 5MB
IMAGE_HOST_TIMEOUT = int(os.environ.get("IMAGE_HOST_TIMEOUT", 30))


def validate_runtime_config() -> None:
    if IS_PRODUCTION and SECRET_KEY == "change-me":
        raise RuntimeError("SECRET_KEY must be set in production.")
