from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class LDProjectorSettings(BaseSettings):
    """Service configuration.

    Environment variables are prefixed with LD_PROJECTOR_.
    """

    model_config = SettingsConfigDict(env_prefix="LD_PROJECTOR_", extra="ignore")

    # HTTP
    bind_host: str = "0.0.0.0"
    bind_port: int = 8080

    # Logging
    log_level: str = Field(default="INFO", description="Python logging level")

    # Dereferencing
    accept_header: str = Field(
        default="text/html",
        description="Accept header sent when dereferencing a source document",
    )
    user_agent: str = "ld-projector/0.1"
    max_body_bytes: int = 8_000_000
    connect_timeout: float = 10.0
    read_timeout: float = 60.0
    write_timeout: float = 20.0
    pool_timeout: float = 10.0
    max_connections: int = 100
    max_keepalive_connections: int = 20

    # Projection
    business_type: str = "http://schema.org/LocalBusiness"
    vocab_base: str = "http://schema.org/"
    context_path: str | None = Field(
        default=None,
        description="JSON-LD context file replacing the built-in vocabulary",
    )
    reuse_source: bool = Field(
        default=True,
        description="Reuse the dereferenced graph for all queries of one request",
    )
    union_graphs: bool = Field(
        default=False,
        description="Query the union of all named graphs instead of the default graph",
    )


settings = LDProjectorSettings()
