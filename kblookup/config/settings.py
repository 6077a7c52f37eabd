
from pydantic_settings import BaseSettings


class Settings(BaseSettings):

    # Google Drive
    drive_root_folder_id: str = ""
    drive_access_token: str = ""
    drive_api_url: str = "https://www.googleapis.com/drive/v3"
    drive_page_size: int = 1000
    drive_timeout: float = 60.0
    drive_retry_attempts: int = 4
    drive_retry_backoff: float = 0.5

    # Storage: "memory" | "file" | "rest"
    storage_backend: str = "file"
    storage_path: str = "./kb_store"
    kv_rest_url: str = ""
    kv_rest_token: str = ""

    # Chunking / retrieval
    chunk_size: int = 1000
    chunk_overlap: int = 200
    chunk_min_length: int = 50
    rag_top_k: int = 6
    name_match_weight: int = 20

    # Local ingestion
    ingest_batch_size: int = 50
    outcome_log_limit: int = 500
    supported_extensions: list[str] = [
        ".pdf", ".docx", ".xlsx", ".csv", ".txt", ".md", ".markdown"
    ]

    # Answer synthesis
    llm_base_url: str = "http://localhost:11434/v1"
    llm_api_key: str = "ollama"
    llm_model: str = "qwen2.5:7b"
    llm_max_tokens: int = 2048
    llm_temperature: float = 0.1

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()
