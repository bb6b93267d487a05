import os
from pathlib import Path
from dotenv import load_dotenv


def load_config():
    # Base .env first; values already set by the OS win
    load_dotenv(".env", override=False)

    # The environment-specific file, if any, overrides the base file
    env = os.getenv("APP_ENV", "dev").lower()
    env_path = Path(f".env.{env}")
    if env_path.exists():
        load_dotenv(env_path, override=True)


load_config()
