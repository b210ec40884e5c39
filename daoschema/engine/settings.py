from __future__ import annotations
import os
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()

class Settings:
    LOG_LEVEL: str
    DIALECT: str
    SCHEMA_FILE: str

    def __init__(self) -> None:
        self.LOG_LEVEL = os.getenv("DAOSCHEMA_LOG_LEVEL", "INFO").upper()
        self.DIALECT = os.getenv("DAOSCHEMA_DIALECT", "sqlite").lower()
        self.SCHEMA_FILE = os.getenv("DAOSCHEMA_SCHEMA_FILE", "schema.json")

@lru_cache
def get_settings() -> Settings:
    return Settings()
