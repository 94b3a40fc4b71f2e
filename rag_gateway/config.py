from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

from rag_gateway import __version__


class Settings(BaseSettings):
    # App
    APP_NAME: str = "mcp-rag-server"
    APP_VERSION: str = __version__
    DEBUG: bool = False

    # Vector store
    CHROMA_URL: str = "http://localhost:8000"
    CHROMA_COLLECTION: str = "mcp_knowledge_base"

    # Embeddings
    EMBEDDING_MODEL: str = "text-embedding-3-large"
    EMBEDDING_DIMENSIONS: int | None = None
    OPENAI_API_KEY: str | None = None

    # Retrieval defaults handed to the pipeline
    RAG_TOP_K: int = 5
    RAG_THRESHOLD: float = 0.5
    RAG_ENABLE_QUERY_EXPANSION: bool = True
    RAG_ENABLE_HYBRID_SEARCH: bool = True

    # Pipeline
    PIPELINE_CLASS: str = ""
    PIPELINE_URL: str = "http://localhost:8100"
    PIPELINE_TIMEOUT_SECONDS: float = 60.0

    # HTTP transport
    HTTP_HOST: str = "127.0.0.1"
    HTTP_PORT: int = 8080

    # MCP
    MCP_LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

@lru_cache()
def get_settings() -> Settings:
    return Settings()
