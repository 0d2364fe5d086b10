"""
Configuration Schema Validation using Pydantic

Schema definitions for every Vagabond configuration section. The loaded
``VagabondConfig`` is built once at process start and handed to each
component explicitly.
"""

from typing import Optional
from enum import Enum
from pathlib import Path
from pydantic import BaseModel, Field, field_validator

from .exceptions import QueryInjectionError
from .security import validate_identifier

DEFAULT_CASSANDRA_PORT = 9042


class LogLevel(str, Enum):
    """Valid logging levels."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class PointerWriteMode(str, Enum):
    """How the current pointer is replaced."""
    TRUNCATE_INSERT = "truncate_insert"
    BATCH = "batch"


class MultiRowPolicy(str, Enum):
    """What to do when the tracking table holds more than one row."""
    REJECT = "reject"
    FIRST = "first"


class MigrationsConfig(BaseModel):
    """Migrations directory layout."""
    directory: Path = Path("migrations")
    manifest: str = Field("vagabond", min_length=1, description="Manifest file name inside the directory")
    script_extension: str = Field("cql", min_length=1, description="Extension of up/down scripts")
    delimiter: str = Field(";", min_length=1, description="Statement delimiter")

    @field_validator('manifest', 'script_extension')
    @classmethod
    def validate_file_part(cls, v):
        if '/' in v or '\\' in v:
            raise ValueError("must not contain path separators")
        return v

    @property
    def manifest_path(self) -> Path:
        return self.directory / self.manifest


class CassandraConfig(BaseModel):
    """Cassandra connection settings."""
    host: Optional[str] = Field(None, description="Contact point, 'host' or 'host:port'")
    port: int = Field(DEFAULT_CASSANDRA_PORT, ge=1, le=65535)
    username: Optional[str] = None
    password: Optional[str] = None
    keyspace: Optional[str] = None
    connect_timeout: float = Field(10.0, gt=0, description="Driver connect timeout in seconds")
    request_timeout: float = Field(30.0, gt=0, description="Driver per-request timeout in seconds")

    @field_validator('keyspace')
    @classmethod
    def validate_keyspace(cls, v):
        if v is None or v == "":
            return None
        try:
            return validate_identifier(v, "keyspace")
        except QueryInjectionError as e:
            raise ValueError(str(e))

    @field_validator('host')
    @classmethod
    def validate_host(cls, v):
        if v is not None and not v.strip():
            return None
        return v.strip() if v else v

    def contact_point(self) -> tuple:
        """Split ``host`` into ``(address, port)``.

        ``CASSANDRA_HOST`` traditionally carries the port (``127.0.0.1:9042``);
        a bare host falls back to ``port``.
        """
        host = self.host or ""
        if host.startswith('['):
            # [ipv6]:port
            address, _, rest = host[1:].partition(']')
            if rest.startswith(':') and rest[1:].isdigit():
                return address, int(rest[1:])
            return address, self.port
        if host.count(':') == 1:
            address, port = host.split(':')
            if port.isdigit():
                return address, int(port)
        return host, self.port


class PointerConfig(BaseModel):
    """Tracking table settings."""
    table: str = "vagabond"
    write_mode: PointerWriteMode = PointerWriteMode.TRUNCATE_INSERT
    multi_row_policy: MultiRowPolicy = MultiRowPolicy.REJECT

    @field_validator('table')
    @classmethod
    def validate_table(cls, v):
        try:
            return validate_identifier(v, "table")
        except QueryInjectionError as e:
            raise ValueError(str(e))


class LoggingConfig(BaseModel):
    """Logging configuration validation."""
    level: LogLevel = LogLevel.INFO
    log_file: Path = Path("logs/vagabond.log")
    max_log_size_mb: int = Field(10, ge=1, le=1024)
    backup_count: int = Field(3, ge=0, le=100)
    console: bool = False


class VagabondConfig(BaseModel):
    """Complete Vagabond configuration."""
    migrations: MigrationsConfig = Field(default_factory=MigrationsConfig)
    cassandra: CassandraConfig = Field(default_factory=CassandraConfig)
    pointer: PointerConfig = Field(default_factory=PointerConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
