"""Configuration management for loan-ledger."""

from dataclasses import dataclass, field
from pathlib import Path

from loan_ledger.exceptions import ConfigurationError

BACKENDS = ("memory", "json", "postgres")


@dataclass
class PostgresConfig:
    """PostgreSQL connection configuration."""

    host: str = "localhost"
    port: int = 5432
    database: str = "loan_ledger"
    user: str = "postgres"
    password: str = "postgres"
    table: str = "loans"

    @property
    def connection_string(self) -> str:
        """Get connection string."""
        return f"postgresql://{self.user}:{self.password}@{self.host}:{self.port}/{self.database}"


@dataclass
class StorageConfig:
    """Which document store backs the ledger."""

    backend: str = "json"
    data_dir: Path = field(default_factory=lambda: Path("ledger_data"))

    def __post_init__(self) -> None:
        if self.backend not in BACKENDS:
            raise ConfigurationError(
                f"Unknown storage backend {self.backend!r}; expected one of {', '.join(BACKENDS)}"
            )


@dataclass
class OutputConfig:
    """Console rendering configuration."""

    pretty_json: bool = True
    max_rows: int | None = None


@dataclass
class LedgerConfig:
    """Main configuration for loan-ledger."""

    storage: StorageConfig = field(default_factory=StorageConfig)
    postgres: PostgresConfig = field(default_factory=PostgresConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    seed: int | None = None
    log_level: str = "INFO"
    log_format: str = "standard"

    @classmethod
    def from_env(cls) -> "LedgerConfig":
        """Create config from environment variables."""
        import os

        storage = StorageConfig(
            backend=os.getenv("LEDGER_BACKEND", "json"),
            data_dir=Path(os.getenv("LEDGER_DATA_DIR", "ledger_data")),
        )

        postgres = PostgresConfig(
            host=os.getenv("POSTGRES_HOST", "localhost"),
            port=int(os.getenv("POSTGRES_PORT", "5432")),
            database=os.getenv("POSTGRES_DB", "loan_ledger"),
            user=os.getenv("POSTGRES_USER", "postgres"),
            password=os.getenv("POSTGRES_PASSWORD", "postgres"),
            table=os.getenv("POSTGRES_TABLE", "loans"),
        )

        max_rows = os.getenv("MAX_ROWS")
        output = OutputConfig(
            pretty_json=os.getenv("PRETTY_JSON", "true").lower() == "true",
            max_rows=int(max_rows) if max_rows else None,
        )

        return cls(
            storage=storage,
            postgres=postgres,
            output=output,
            seed=int(os.getenv("SEED")) if os.getenv("SEED") else None,
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_format=os.getenv("LOG_FORMAT", "standard"),
        )
