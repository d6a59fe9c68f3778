# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-02
# Description: Config
# -----------------------------------------------------------------------------

import os
from dataclasses import dataclass
from dotenv import load_dotenv, find_dotenv

# Load .env once globally
load_dotenv(find_dotenv(usecwd=True), override=True)


@dataclass(frozen=True)
class Config:
    # Azure OpenAI (embeddings)
    openai_azure_api_key: str
    openai_azure_endpoint: str
    openai_azure_embed_deployment: str
    openai_api_version: str = "2024-10-21"

    # Chroma Vector Database (self-hosted HTTP server)
    chroma_host: str = ""
    chroma_port: int = 8000
    chroma_ssl: bool = False

    # Chroma Cloud (optional; used when tenant + api key are set)
    chroma_api_key: str = ""
    chroma_tenant: str = ""
    chroma_database: str = ""

    # Local persistent Chroma (optional; used when no host is set)
    chroma_path: str = ""

    # ---- Single source of truth: field_name -> ENV VAR NAME ----
    ENV_VARS = {
        # Azure OpenAI
        "openai_azure_api_key": "AZURE_OPENAI_API_KEY",
        "openai_azure_endpoint": "AZURE_OPENAI_ENDPOINT",
        "openai_azure_embed_deployment": "AZURE_OPENAI_EMBED_DEPLOYMENT",
        "openai_api_version": "AZURE_OPENAI_API_VERSION",

        # Chroma
        "chroma_host": "CHROMA_HOST",
        "chroma_port": "CHROMA_PORT",
        "chroma_ssl": "CHROMA_SSL",
        "chroma_api_key": "CHROMA_API_KEY",
        "chroma_tenant": "CHROMA_TENANT",
        "chroma_database": "CHROMA_DATABASE",
        "chroma_path": "CHROMA_PATH",
    }

    REQUIRED_FIELDS = (
        "openai_azure_api_key",
        "openai_azure_endpoint",
        "openai_azure_embed_deployment",
    )

    # Convenient *groups* for use in tests / health checks
    AZURE_OPENAI_ENV_VARS = (
        "AZURE_OPENAI_API_KEY",
        "AZURE_OPENAI_ENDPOINT",
        "AZURE_OPENAI_EMBED_DEPLOYMENT",
    )

    CHROMA_ENV_VARS = (
        "CHROMA_HOST",
        "CHROMA_TENANT",
        "CHROMA_PATH",
    )

    @staticmethod
    def from_env() -> "Config":
        """Build Config object from environment variables."""
        kwargs = {}
        for field_name, env_name in Config.ENV_VARS.items():
            value = os.getenv(env_name)
            if value is None or value.strip() == "":
                continue
            kwargs[field_name] = value.strip()

        if "chroma_port" in kwargs:
            try:
                kwargs["chroma_port"] = int(kwargs["chroma_port"])
            except ValueError as e:
                raise ValueError(f"CHROMA_PORT must be an int, got {kwargs['chroma_port']!r}") from e
        if "chroma_ssl" in kwargs:
            kwargs["chroma_ssl"] = kwargs["chroma_ssl"].lower() in ("1", "true", "yes", "y", "on")

        for name in Config.REQUIRED_FIELDS:
            kwargs.setdefault(name, "")
        return Config(**kwargs)

    def __post_init__(self):
        """
        Fail fast if any required config is missing, or if no Chroma
        location (host, cloud tenant or local path) was supplied.
        """
        missing_fields = [k for k in self.REQUIRED_FIELDS if not getattr(self, k)]

        if missing_fields:
            missing_env_vars = [self.ENV_VARS[f] for f in missing_fields]
            raise ValueError(f"Missing required environment variables: {missing_env_vars}")

        if not (self.chroma_host or self.chroma_tenant or self.chroma_path):
            raise ValueError(
                f"One of the Chroma location variables must be set: {list(self.CHROMA_ENV_VARS)}"
            )

    @property
    def chroma_mode(self) -> str:
        if self.chroma_tenant and self.chroma_api_key:
            return "cloud"
        if self.chroma_host:
            return "http"
        return "persistent"

    def summary(self) -> dict:
        """Return a safe, non-sensitive summary for logging."""
        return {
            "openai_azure_endpoint": self.openai_azure_endpoint,
            "openai_azure_embed_deployment": self.openai_azure_embed_deployment,
            "openai_api_version": self.openai_api_version,
            "chroma_mode": self.chroma_mode,
            "chroma_host": self.chroma_host,
            "chroma_port": self.chroma_port,
            "chroma_tenant": self.chroma_tenant,
            "chroma_database": self.chroma_database,
            "chroma_path": self.chroma_path,
        }
