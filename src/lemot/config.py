"""Configuration settings for the trainer."""
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Define base directory
BASE_DIR = Path(__file__).parent.parent.parent

# Load environment variables from .env file
env_file = ".env.test" if os.getenv("ENV") == "test" else ".env"
load_dotenv(env_file)


# Define data directories from environment variables
DATA_DIR = Path(os.getenv("DATA_DIR", "./data"))
EXPORTS_DIR = DATA_DIR / "exports"

# Learning settings
GRADUATION_THRESHOLD = 5  # consecutive correct answers
COLD_AFTER_DAYS = 3  # words not seen for longer are "cold"
FALLBACK_DISTRACTORS = ["dire", "faire", "aller"]


def ensure_directories() -> None:
    """Ensure all required directories exist."""
    directories = [
        DATA_DIR,
        EXPORTS_DIR,
    ]

    for directory in directories:
        directory.mkdir(parents=True, exist_ok=True)


@dataclass
class PathSettings:
    """Path configuration settings."""
    base_dir: Path = BASE_DIR
    data_dir: Path = DATA_DIR
    exports_dir: Path = EXPORTS_DIR


@dataclass
class DatabaseSettings:
    """Database configuration settings."""
    url: str = os.getenv("DATABASE_URL", "sqlite:///lemot.db")
    echo: bool = os.getenv("DATABASE_ECHO", "false").lower() == "true"


@dataclass
class LoggingSettings:
    """Logging configuration settings."""
    level: str = os.getenv("LOG_LEVEL", "INFO")
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    dir: Optional[str] = os.getenv("LOG_DIR", None)
    rotation: str = os.getenv("LOG_ROTATION", "midnight")
    interval: int = int(os.getenv("LOG_INTERVAL", "1"))
    backup_count: int = int(os.getenv("LOG_BACKUP_COUNT", "7"))


@dataclass
class LearningSettings:
    """Learning process settings."""
    graduation_threshold: int = int(os.getenv("GRADUATION_THRESHOLD", str(GRADUATION_THRESHOLD)))
    default_weight: float = float(os.getenv("DEFAULT_WEIGHT", "0.5"))
    weight_increment: float = float(os.getenv("WEIGHT_INCREMENT", "0.1"))
    cold_after_days: int = int(os.getenv("COLD_AFTER_DAYS", str(COLD_AFTER_DAYS)))
    cold_ratio: float = float(os.getenv("COLD_RATIO", "0.75"))
    default_session_size: int = int(os.getenv("DEFAULT_SESSION_SIZE", "10"))
    max_session_size: int = int(os.getenv("MAX_SESSION_SIZE", "99"))


@dataclass
class ContentSettings:
    """Content generation settings."""
    target_language: str = os.getenv("TARGET_LANGUAGE", "fr")
    native_language: str = os.getenv("NATIVE_LANGUAGE", "zh-CN")
    distractor_count: int = int(os.getenv("DISTRACTOR_COUNT", "3"))
    fallback_distractors: list[str] = field(default_factory=lambda: list(FALLBACK_DISTRACTORS))
    unknown_label: str = os.getenv("UNKNOWN_LABEL", "未知")
    blank_marker: str = os.getenv("BLANK_MARKER", "___")


@dataclass
class GeneratorSettings:
    """Text generation service settings."""
    api_key: Optional[str] = os.getenv("OPENAI_API_KEY")
    model: str = os.getenv("OPENAI_MODEL", "gpt-4o-mini")
    timeout: float = float(os.getenv("OPENAI_TIMEOUT", "30"))


def get_path_settings() -> PathSettings:
    """Get path settings."""
    return PathSettings()


def get_database_settings() -> DatabaseSettings:
    """Get database settings."""
    return DatabaseSettings()


def get_logging_settings() -> LoggingSettings:
    """Get logging settings."""
    return LoggingSettings()


def get_learning_settings() -> LearningSettings:
    """Get learning settings."""
    return LearningSettings()


def get_content_settings() -> ContentSettings:
    """Get content settings."""
    return ContentSettings()


def get_generator_settings() -> GeneratorSettings:
    """Get generator settings."""
    return GeneratorSettings()


@dataclass
class Settings:
    """Main settings class that combines all configuration settings."""
    paths: PathSettings = field(default_factory=get_path_settings)
    database: DatabaseSettings = field(default_factory=get_database_settings)
    logging: LoggingSettings = field(default_factory=get_logging_settings)
    learning: LearningSettings = field(default_factory=get_learning_settings)
    content: ContentSettings = field(default_factory=get_content_settings)
    generator: GeneratorSettings = field(default_factory=get_generator_settings)

    def validate(self) -> None:
        """Validate settings and raise ValueError if invalid."""
        if self.learning.cold_ratio < 0 or self.learning.cold_ratio > 1:
            raise ValueError("COLD_RATIO must be between 0 and 1")

        if self.learning.graduation_threshold < 1:
            raise ValueError("GRADUATION_THRESHOLD must be positive")

        if self.learning.cold_after_days < 0:
            raise ValueError("COLD_AFTER_DAYS cannot be negative")

        if self.learning.weight_increment < 0:
            raise ValueError("WEIGHT_INCREMENT cannot be negative")

        if self.learning.default_session_size < 1 or self.learning.max_session_size < 1:
            raise ValueError("Session sizes must be positive")

        if self.learning.default_session_size > self.learning.max_session_size:
            raise ValueError("DEFAULT_SESSION_SIZE cannot be greater than MAX_SESSION_SIZE")

        if self.content.distractor_count < 1:
            raise ValueError("DISTRACTOR_COUNT must be positive")

        if not self.content.blank_marker:
            raise ValueError("BLANK_MARKER cannot be empty")


# Create global settings instance
settings = Settings()
settings.validate()
