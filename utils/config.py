import os
import dotenv
dotenv.load_dotenv()


class Settings:
    LOG_LEVEL: str = os.getenv('EDIFACT_LOG_LEVEL', 'INFO')
    # Unset means log to stderr
    LOG_FILE: str = os.getenv('EDIFACT_LOG_FILE')

    # Upper bound on segments per message, checked by callers before dispatch
    MAX_SEGMENTS: int = int(os.getenv('EDIFACT_MAX_SEGMENTS', '10000'))

    APP_NAME: str = os.getenv('APP_NAME', 'EDIFACT-Engine')

settings = Settings()
