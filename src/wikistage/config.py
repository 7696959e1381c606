"""Configuration management for Wikistage.

Supports TOML configuration format with auto-discovery.
"""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field, replace
from pathlib import Path

from wikistage.core.paths import is_valid_title

CONFIG_FILENAME = "wikistage.toml"
DEFAULT_FRONT_PAGE = "FrontPage"


@dataclass
class ServerConfig:
    """Server configuration."""

    host: str = "127.0.0.1"
    port: int = 8080


@dataclass
class WikiConfig:
    """Wiki storage and presentation configuration."""

    data_dir: Path = field(default_factory=lambda: Path("data"))
    templates_dir: Path | None = None
    front_page: str = DEFAULT_FRONT_PAGE


@dataclass
class Config:
    """Application configuration."""

    server: ServerConfig
    wiki: WikiConfig
    config_path: Path | None = None

    @classmethod
    def load(cls, config_path: Path | None = None) -> Config:
        """Load configuration from file.

        If config_path is provided, loads from that file.
        Otherwise, searches for wikistage.toml in current directory and parents.

        Args:
            config_path: Optional explicit path to config file

        Returns:
            Config instance with defaults for missing sections

        Raises:
            FileNotFoundError: If explicit config_path doesn't exist
            ValueError: If configuration is invalid
        """
        if config_path is not None:
            if not config_path.exists():
                raise FileNotFoundError(f"Configuration file not found: {config_path}")
            return cls._load_from_file(config_path)

        discovered_path = cls._discover_config()
        if discovered_path is None:
            return cls._default()

        return cls._load_from_file(discovered_path)

    @classmethod
    def _discover_config(cls) -> Path | None:
        """Search for config file in current directory and parents."""
        current = Path.cwd()
        while True:
            candidate = current / CONFIG_FILENAME
            if candidate.exists():
                return candidate
            parent = current.parent
            if parent == current:
                return None
            current = parent

    @classmethod
    def _default(cls) -> Config:
        return cls(server=ServerConfig(), wiki=WikiConfig())

    @classmethod
    def _load_from_file(cls, path: Path) -> Config:
        """Load configuration from a specific file.

        Args:
            path: Path to TOML configuration file

        Returns:
            Config instance

        Raises:
            ValueError: If configuration is invalid
        """
        with path.open("rb") as f:
            try:
                data = tomllib.load(f)
            except tomllib.TOMLDecodeError as e:
                raise ValueError(f"Invalid TOML in {path}: {e}") from e

        config_dir = path.parent

        server = cls._parse_server(data.get("server"))
        wiki = cls._parse_wiki(data.get("wiki"), config_dir)

        return cls(server=server, wiki=wiki, config_path=path)

    @classmethod
    def _parse_server(cls, data: object) -> ServerConfig:
        """Parse server configuration section.

        Args:
            data: Raw server section data

        Returns:
            ServerConfig instance
        """
        if data is None:
            return ServerConfig()

        if not isinstance(data, dict):
            raise ValueError("server section must be a dictionary")

        host = data.get("host", "127.0.0.1")
        if not isinstance(host, str):
            raise ValueError("server.host must be a string")

        port = data.get("port", 8080)
        # bool is an int subclass
        if not isinstance(port, int) or isinstance(port, bool):
            raise ValueError("server.port must be an integer")

        return ServerConfig(host=host, port=port)

    @classmethod
    def _parse_wiki(cls, data: object, config_dir: Path) -> WikiConfig:
        """Parse wiki configuration section.

        Args:
            data: Raw wiki section data
            config_dir: Directory containing config file (for relative paths)

        Returns:
            WikiConfig instance
        """
        if data is None:
            return WikiConfig(data_dir=config_dir / "data")

        if not isinstance(data, dict):
            raise ValueError("wiki section must be a dictionary")

        data_dir = data.get("data_dir", "data")
        if not isinstance(data_dir, str):
            raise ValueError("wiki.data_dir must be a string")

        templates_dir = data.get("templates_dir")
        if templates_dir is not None and not isinstance(templates_dir, str):
            raise ValueError("wiki.templates_dir must be a string")

        front_page = data.get("front_page", DEFAULT_FRONT_PAGE)
        if not isinstance(front_page, str):
            raise ValueError("wiki.front_page must be a string")
        if not is_valid_title(front_page):
            raise ValueError("wiki.front_page must contain only letters and digits")

        return WikiConfig(
            data_dir=config_dir / data_dir,
            templates_dir=config_dir / templates_dir if templates_dir is not None else None,
            front_page=front_page,
        )

    def with_overrides(
        self,
        *,
        host: str | None = None,
        port: int | None = None,
        data_dir: Path | None = None,
        templates_dir: Path | None = None,
    ) -> Config:
        """Create a new Config with CLI overrides applied.

        Only non-None values override the existing config. The original
        Config is not modified.

        Args:
            host: Override server.host
            port: Override server.port
            data_dir: Override wiki.data_dir
            templates_dir: Override wiki.templates_dir

        Returns:
            New Config instance with overrides applied
        """
        server = self.server
        if host is not None or port is not None:
            server = replace(
                self.server,
                host=host if host is not None else self.server.host,
                port=port if port is not None else self.server.port,
            )

        wiki = self.wiki
        if data_dir is not None or templates_dir is not None:
            wiki = replace(
                self.wiki,
                data_dir=data_dir if data_dir is not None else self.wiki.data_dir,
                templates_dir=(
                    templates_dir if templates_dir is not None else self.wiki.templates_dir
                ),
            )

        return replace(self, server=server, wiki=wiki)
