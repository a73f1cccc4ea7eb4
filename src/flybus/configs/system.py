from datetime import timedelta

from pydantic import BaseModel, Field, SecretStr


class ThirdPartyConfig(BaseModel):
    """Configuration for third-party integrations."""

    redis_uri: str = Field(
        default="redis://localhost:6379",
        description="Redis connection URI (rate limiting + broadcast)",
    )


class APIConfig(BaseModel):
    """API configuration settings."""

    api_key: SecretStr = Field(
        default=SecretStr(""),
        description="Shared secret expected in the x-api-key header",
    )
    rate_limit_window: timedelta = Field(
        default=timedelta(minutes=15),
        description="Sliding window for the per-IP rate limit",
    )
    rate_limit_max_requests: int = Field(
        default=100,
        description="Requests allowed per IP within the window (0 disables)",
    )
    cors_origins: list[str] = Field(
        default_factory=lambda: [
            "http://localhost:3000",
            "http://localhost:8080",
        ],
        description="Origins allowed by the CORS middleware",
    )


class SessionConfig(BaseModel):
    """Per-session dialogue context settings."""

    ttl: timedelta = Field(
        default=timedelta(hours=1),
        description="Age after which a stored context is treated as absent",
    )
    language_detector: str = Field(
        default="fixed",
        description="Registered language detector name",
    )


class LLMConfig(BaseModel):
    """Text generation endpoint settings."""

    endpoint: str | None = Field(
        default=None,
        description="OpenAI-compatible base URL; None uses the OpenAI default",
    )
    api_key: SecretStr = Field(
        default=SecretStr(""), description="API key for the model endpoint"
    )
    model_name: str = Field(
        default="gpt-4-1106-preview", description="Chat completion model"
    )
    temperature: float = Field(
        default=0.7, description="Sampling temperature for model responses"
    )
    max_tokens: int = Field(
        default=500, description="Maximum tokens in a single response"
    )
    model_timeout: timedelta = Field(
        default=timedelta(seconds=60),
        description="Request timeout for a single generation call",
    )


class BroadcastConfig(BaseModel):
    """Real-time conversation broadcast settings."""

    enabled: bool = Field(default=True, description="Publish conversation events")
    channel: str = Field(default="chat-channel", description="Pub/sub channel")
    event_name: str = Field(
        default="conversation-update", description="Event name in the envelope"
    )


class PromptConfig(BaseModel):
    """Settings for the grounded generation prompt."""

    service_name: str = Field(
        default="Reykjavík Excursions Flybus",
        description="Service the assistant speaks for",
    )
    terminology: dict[str, str] = Field(
        default_factory=lambda: {
            "bsi": "BSÍ Bus Terminal",
            "bus terminal": "BSÍ Bus Terminal",
            "pickup": "pick-up",
            "drop off": "drop-off",
            "bus": "coach",
            "guest": "passenger",
        },
        description="Brand-preferred wording, term -> preferred term",
    )


class LoggingConfig(BaseModel):
    """Root logger settings."""

    level: str = Field(default="INFO", description="Root log level")
    json_output: bool = Field(
        default=True, description="Emit JSON lines instead of coloured text"
    )


class TracingConfig(BaseModel):
    """OpenTelemetry tracing settings."""

    enabled: bool = Field(default=False, description="Enable OTLP export")
    endpoint: str = Field(default="", description="OTLP HTTP traces endpoint")
    username: str = Field(default="", description="Basic auth user")
    password: str = Field(default="", description="Basic auth password")
    service_name: str = Field(default="flybus-chat", description="service.name")
    sample_rate: float = Field(default=1.0, description="Root sampling ratio")
    excluded_urls: list[str] = Field(
        default_factory=lambda: ["/metrics"],
        description="Paths excluded from HTTP instrumentation",
    )
