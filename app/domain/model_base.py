from sqlalchemy.orm import declarative_base
import datetime

Base = declarative_base()


def utcnow() -> datetime.datetime:
    """Naive UTC timestamp, the format every DateTime column is stored in."""
    return datetime.datetime.now(datetime.timezone.utc).replace(tzinfo=None)
