"""Record count cache policy."""

from pydantic import BaseModel, ConfigDict, Field


class CachePolicy(BaseModel):
    """Expiration policy for a cached table record count."""

    model_config = ConfigDict(frozen=True)

    lifetime: float = Field(
        default=0.0,
        ge=0.0,
        description="Seconds a cached record count stays valid (0 disables caching)",
    )

    @property
    def enabled(self) -> bool:
        return self.lifetime > 0
