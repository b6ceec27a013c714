"""Prompt management: loads prompt templates from YAML files in this package."""
import yaml
from typing import Dict, Any
from pathlib import Path


class PromptLoader:
    """Load and cache prompt templates from YAML files."""

    def __init__(self, prompts_dir: Path = None):
        self.prompts_dir = prompts_dir or Path(__file__).parent
        self._yaml_cache: Dict[str, Dict[str, Any]] = {}

    def _load_yaml(self, filename: str) -> Dict[str, Any]:
        if filename in self._yaml_cache:
            return self._yaml_cache[filename]

        file_path = self.prompts_dir / filename
        if not file_path.exists():
            raise FileNotFoundError(f"Prompt file not found: {file_path}")

        with open(file_path, "r", encoding="utf-8") as f:
            prompts = yaml.safe_load(f)

        self._yaml_cache[filename] = prompts
        return prompts

    def get_prompt(self, filename: str, key: str) -> str:
        prompts = self._load_yaml(filename)
        if key not in prompts:
            raise KeyError(f"Prompt key '{key}' not found in {filename}")

        return prompts[key]


prompt_loader = PromptLoader()
