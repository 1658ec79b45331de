"""Configuration loading: overrides → env vars → ``.env`` file → defaults."""

from __future__ import annotations

import codecs
import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from fileworks.lib.errors import InvalidArgument

__all__ = ["Config", "ConfigValue"]

logger = logging.getLogger(__name__)

ConfigValue = str | bool | None

DEFAULT_CHARSET = "utf-8"


def _validate_charset(charset: str) -> None:
    """Warn if *charset* is not a codec Python knows about."""
    try:
        codecs.lookup(charset)
    except LookupError:
        logger.warning(
            "Charset '%s' is not a known codec; text streams opened "
            "without an explicit charset will fail",
            charset,
        )


def _validate_working_directory(working_directory: str) -> None:
    """Validate that an explicit starting working directory exists."""
    if not working_directory:
        return
    if Path(working_directory).is_dir():
        return
    msg = f"Invalid working directory '{working_directory}': not a directory"
    raise InvalidArgument(msg)


def _load_env_files() -> None:
    """Load a dotenv file from the current directory, if present."""
    load_dotenv(Path.cwd() / ".env", override=False)


def _env_flag(name: str) -> bool:
    return os.environ.get(name, "").lower() in ("1", "true", "yes")


@dataclass(frozen=True)
class Config:
    """Immutable library configuration."""

    charset: str = DEFAULT_CHARSET
    working_directory: str = ""
    verbose: bool = False

    def __post_init__(self) -> None:
        """Validate config fields on creation.

        An unknown ``charset`` only logs a warning since it is only needed
        once a text stream is opened without an explicit charset. A
        ``working_directory`` is stored with ``~`` expanded; one that is set
        but is not a directory raises ``InvalidArgument``.
        """
        _validate_charset(self.charset)
        if self.working_directory:
            object.__setattr__(
                self,
                "working_directory",
                os.path.expanduser(self.working_directory),
            )
        _validate_working_directory(self.working_directory)

    @classmethod
    def from_env(cls, overrides: dict[str, ConfigValue] | None = None) -> Config:
        """Build config from environment variables, then apply overrides.

        Priority: overrides > env vars > defaults.
        """
        _load_env_files()

        env_values: dict[str, ConfigValue] = {
            "charset": os.environ.get("FILEWORKS_CHARSET"),
            "working_directory": os.environ.get("FILEWORKS_CWD"),
            "verbose": _env_flag("FILEWORKS_VERBOSE"),
        }

        merged = {k: v for k, v in env_values.items() if v}
        if overrides:
            merged.update({k: v for k, v in overrides.items() if v is not None})

        return cls(
            charset=str(merged.get("charset", cls.charset)),
            working_directory=str(
                merged.get("working_directory", cls.working_directory)
            ),
            verbose=bool(merged.get("verbose", cls.verbose)),
        )

    def configure_logging(self) -> None:
        """Route ``fileworks`` log records to stderr at the configured level."""
        level = logging.DEBUG if self.verbose else logging.WARNING
        package_logger = logging.getLogger("fileworks")
        package_logger.setLevel(level)
        if not package_logger.handlers:
            handler = logging.StreamHandler()
            handler.setFormatter(
                logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
            )
            package_logger.addHandler(handler)
