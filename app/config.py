"""
Application configuration
"""
from pathlib import Path

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings"""
    
    # API
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8080
    API_TITLE: str = "Classfile Ranker API"
    API_VERSION: str = "0.1.0"
    
    # Archives are resolved relative to this root unless given absolute
    ARCHIVES_ROOT: str = "/files/archives"
    RESULTS_PATH: str = "/files/results"
    
    # Ranking defaults
    DEFAULT_TOP_N: int = 10
    
    @property
    def archives_root(self) -> Path:
        return Path(self.ARCHIVES_ROOT)
    
    @property
    def results_path(self) -> Path:
        return Path(self.RESULTS_PATH)
    
    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
