"""Typed configuration dataclasses for lost-found-matcher.

Provides strongly-typed configuration objects that can be used throughout
the application for better type safety and IDE support.
"""
from __future__ import annotations
from dataclasses import dataclass, field, asdict
from typing import Dict, Any


@dataclass
class MatchingConfig:
    """Match discovery configuration (aligned with _DEFAULTS)."""
    min_similarity: float = 0.3  # candidates must score strictly above this
    diagnose_top_n: int = 5  # closest candidates listed by `lfm diagnose`

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for backward compatibility."""
        return asdict(self)


@dataclass
class LoggingConfig:
    """Progress logging configuration for bulk runs."""
    progress_enabled: bool = True
    progress_interval: int = 100

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for backward compatibility."""
        return asdict(self)


@dataclass
class DatabaseConfig:
    """Record store configuration."""
    path: str = "data/db/lost_found.db"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for backward compatibility."""
        return asdict(self)


@dataclass
class AppConfig:
    """Root application configuration with all subsections."""
    log_level: str = "INFO"
    matching: MatchingConfig = field(default_factory=MatchingConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    database: DatabaseConfig = field(default_factory=DatabaseConfig)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to nested dictionary.

        Returns:
            Nested dict structure matching config format
        """
        return {
            "log_level": self.log_level,
            "matching": self.matching.to_dict(),
            "logging": self.logging.to_dict(),
            "database": self.database.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> AppConfig:
        """Create typed config from dictionary.

        Args:
            data: Dictionary config (from load_config)

        Returns:
            Typed AppConfig instance
        """
        return cls(
            log_level=data.get("log_level", "INFO"),
            matching=MatchingConfig(**data.get("matching", {})),
            logging=LoggingConfig(**data.get("logging", {})),
            database=DatabaseConfig(**data.get("database", {})),
        )


__all__ = [
    "AppConfig",
    "MatchingConfig",
    "LoggingConfig",
    "DatabaseConfig",
]
