import os
from typing import Optional

from dotenv import load_dotenv


class EnvManager:
    """Read settings from the process environment, loading `.env` once."""

    _loaded: bool = False

    @classmethod
    def load(cls, env_file: Optional[str] = None) -> None:
        if cls._loaded:
            return
        load_dotenv(env_file or os.path.join(os.getcwd(), ".env"))
        cls._loaded = True

    @classmethod
    def get_env_variable(cls, name: str, default: str = "") -> str:
        cls.load()
        return os.getenv(name, default)

    @classmethod
    def get_bool(cls, name: str, default: bool = False) -> bool:
        value = cls.get_env_variable(name, str(default))
        return value.strip().lower() in ("1", "true", "yes", "on")
