# course_nest/config.py
import os
from dataclasses import dataclass
from typing import Optional
from urllib.parse import quote_plus

from dotenv import load_dotenv

load_dotenv()

DEFAULT_DB_NAME = "course_nest_db"
DEFAULT_CLUSTER_HOST = "mydb81.7dbidnl.mongodb.net"
DEFAULT_APP_NAME = "MyDB81"


@dataclass(frozen=True)
class Settings:
    mongodb_uri: str
    db_name: str = DEFAULT_DB_NAME
    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "INFO"


def build_mongodb_uri(user: Optional[str], password: Optional[str],
                      host: str = DEFAULT_CLUSTER_HOST, app_name: str = DEFAULT_APP_NAME) -> str:
    """Assemble an Atlas SRV connection string from its parts"""
    credentials = ""
    if user:
        credentials = quote_plus(user)
        if password:
            credentials += f":{quote_plus(password)}"
        credentials += "@"
    return f"mongodb+srv://{credentials}{host}/?appName={app_name}"


def get_settings() -> Settings:
    """Read settings from the environment (and a .env file, if present)"""
    uri = os.getenv("MONGODB_URI")
    if not uri:
        uri = build_mongodb_uri(
            os.getenv("CS_USER"),
            os.getenv("CS_PASS"),
            host=os.getenv("CS_HOST", DEFAULT_CLUSTER_HOST),
            app_name=os.getenv("CS_APP_NAME", DEFAULT_APP_NAME),
        )
    return Settings(
        mongodb_uri=uri,
        db_name=os.getenv("DB_NAME", DEFAULT_DB_NAME),
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "3000")),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )
