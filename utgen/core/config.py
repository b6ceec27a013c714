"""Generator configuration settings."""
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class GenSettings(BaseSettings):
    """Settings for a unit test generation run, loaded from UTGEN_* environment variables."""

    # Target files
    source_file_path: str = ""
    test_file_path: str = ""

    # Test execution
    test_command: str = ""
    test_dir: str = "."

    # Coverage
    coverage_report_path: str = "coverage.xml"
    coverage_format: str = "cobertura"
    desired_coverage: float = Field(default=80.0, ge=0, le=100)
    max_iterations: int = Field(default=5, ge=1)

    # AI/GenAI
    model: str = "gpt-4o"
    api_base_url: str = "https://api.openai.com/v1"
    api_key: Optional[str] = None
    llm_timeout: int = 180
    additional_prompt: str = ""

    # Console
    show_progress: bool = True

    model_config = SettingsConfigDict(
        env_prefix="UTGEN_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
        protected_namespaces=(),
    )
