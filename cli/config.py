"""Configuration for the CLI tool."""

from pydantic import BaseModel, Field, SecretStr


class CLIConfig(BaseModel):
    """CLI connection settings."""

    host: str = Field(default="localhost", description="Server host")
    port: int = Field(default=8080, description="Server port")
    api_path: str = Field(default="/chat", description="Chat endpoint path")
    api_key: SecretStr = Field(
        default=SecretStr(""), description="Value sent in the x-api-key header"
    )

    @property
    def base_url(self) -> str:
        return f"http://{self.host}:{self.port}"

    @property
    def chat_url(self) -> str:
        return f"{self.base_url}{self.api_path}"
