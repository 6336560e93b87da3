"""Configuration for the CLI tool."""

from pydantic import BaseModel, Field


class CLIConfig(BaseModel):
    """CLI configuration settings."""

    host: str = Field(default="localhost", description="Server host")
    port: int = Field(default=8000, description="Server port")
    api_prefix: str = Field(default="/api", description="API path prefix")
    timeout_seconds: float = Field(
        default=120.0, description="HTTP timeout for one request"
    )

    @property
    def base_url(self) -> str:
        """Get the base URL for the API."""
        return f"http://{self.host}:{self.port}"

    @property
    def chat_url(self) -> str:
        return f"{self.base_url}{self.api_prefix}/chat"

    @property
    def calculate_url(self) -> str:
        return f"{self.base_url}{self.api_prefix}/calculate"
