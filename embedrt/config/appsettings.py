from pydantic import BaseModel, Field


class EmbeddingConfig(BaseModel):
    default_model: str = Field(default="BAAI/bge-small-en-v1.5")
    default_max_length: int = Field(default=512)
    cache_dir: str = Field(default=".embedrt_cache")
    batch_size: int = Field(default=256)
    baseline_provider: str = Field(default="CPUExecutionProvider")


class AppSettings(BaseModel):
    embedding: EmbeddingConfig = Field(default_factory=EmbeddingConfig)
