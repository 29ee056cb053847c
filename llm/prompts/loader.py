"""Prompt loading and rendering from the YAML files in this directory."""

import yaml
from pathlib import Path
from typing import Dict, Any, Optional
from logger import get_logger

logger = get_logger()

_REQUIRED_KEYS = ("system_prompt", "user_prompt_template")


class PromptManager:
    """Loads prompt YAML files (cached per name) and renders their templates.

    A prompt file holds ``version``, ``parameters`` (model, temperature,
    max_tokens), ``system_prompt`` and ``user_prompt_template``. The template
    uses ``str.format`` placeholders.
    """

    def __init__(self, prompts_dir: Optional[Path] = None):
        self.prompts_dir = prompts_dir or Path(__file__).parent
        self._cache: Dict[str, Dict[str, Any]] = {}

    def load_prompt(self, prompt_name: str) -> Dict[str, Any]:
        """Load a prompt configuration by name (file name without .yaml).

        Raises:
            FileNotFoundError: If the prompt file doesn't exist.
            ValueError: If the file lacks a required key.
            yaml.YAMLError: If the YAML is invalid.
        """
        if prompt_name in self._cache:
            return self._cache[prompt_name]

        prompt_file = self.prompts_dir / f"{prompt_name}.yaml"
        if not prompt_file.exists():
            raise FileNotFoundError(f"Prompt file not found: {prompt_file}")

        logger.debug(f"Loading prompt from {prompt_file}")
        with open(prompt_file, "r", encoding="utf-8") as f:
            prompt_config = yaml.safe_load(f) or {}

        missing = [key for key in _REQUIRED_KEYS if key not in prompt_config]
        if missing:
            raise ValueError(f"Prompt {prompt_name} is missing: {', '.join(missing)}")

        self._cache[prompt_name] = prompt_config
        return prompt_config

    def render_prompt(
        self, prompt_name: str, variables: Dict[str, Any]
    ) -> Dict[str, Any]:
        """Render a prompt's user template with the given variables.

        Returns:
            Dictionary with keys system_prompt, user_prompt, parameters, version.

        Raises:
            ValueError: If the template references a variable that was not given.
        """
        prompt_config = self.load_prompt(prompt_name)

        try:
            user_prompt = prompt_config["user_prompt_template"].format(**variables)
        except KeyError as e:
            raise ValueError(f"Prompt {prompt_name} needs variable {e}") from e

        return {
            "system_prompt": prompt_config["system_prompt"],
            "user_prompt": user_prompt,
            "parameters": prompt_config.get("parameters", {}),
            "version": prompt_config.get("version", "unknown"),
        }
