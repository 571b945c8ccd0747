from pydantic_settings import BaseSettings

_CHROME_UA = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/124.0.0.0 Safari/537.36"
)


class Settings(BaseSettings):
    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    base_url: str = "https://beauty.hotpepper.jp"
    user_agent: str = _CHROME_UA
    request_timeout: float = 30.0
    log_level: str = "INFO"

    default_page_limit: int = 5
    max_page_limit: int = 10
    preview_size: int = 5

    # Continuous mode
    list_worker_count: int = 10
    detail_worker_count: int = 10
    worker_delay: float = 0.2  # seconds between items within one worker

    # Chunked mode
    chunk_size: int = 15
    chunk_worker_count: int = 3
    chunk_delay: float = 0.5  # seconds between waves inside a chunk

    max_jobs: int = 100
