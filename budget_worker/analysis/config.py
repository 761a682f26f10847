from dataclasses import dataclass


@dataclass(frozen=True)
class AnalysisClientConfig:
    """Connection settings for one reasoning engine client.

    Built by the caller and handed to the client; clients never read the
    environment themselves.
    """

    api_key: str
    model: str
    timeout_seconds: float = 60.0
    base_url: str | None = None

    def __post_init__(self) -> None:
        if not self.model:
            raise ValueError("AnalysisClientConfig.model must be a non-empty string")
        if self.timeout_seconds <= 0:
            raise ValueError("AnalysisClientConfig.timeout_seconds must be positive")
