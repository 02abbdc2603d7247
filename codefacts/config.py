from __future__ import annotations

import json
from typing import Annotated, List, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from .fs_scan import DEFAULT_IGNORE_DIRS


class Settings(BaseSettings):
	"""Analyzer settings, overridable with ``CODEFACTS_*`` environment variables."""

	model_config = SettingsConfigDict(
		env_prefix="CODEFACTS_",
		env_file=".env",
		extra="ignore",
	)

	python_candidates: Annotated[List[str], NoDecode] = ["python3", "python"]
	# seconds; None waits forever
	subprocess_timeout: Optional[float] = 60.0
	log_level: str = "INFO"
	ignore_dirs: Annotated[List[str], NoDecode] = list(DEFAULT_IGNORE_DIRS)

	@field_validator("python_candidates", "ignore_dirs", mode="before")
	@classmethod
	def parse_list(cls, value):
		if isinstance(value, str):
			value = value.strip()
			if not value:
				return []
			if value.startswith("[") and value.endswith("]"):
				try:
					parsed = json.loads(value)
					if isinstance(parsed, list):
						return [str(item).strip() for item in parsed if str(item).strip()]
				except json.JSONDecodeError:
					pass
			return [item.strip() for item in value.split(",") if item.strip()]
		return value

	@field_validator("subprocess_timeout", mode="before")
	@classmethod
	def parse_timeout(cls, value):
		if isinstance(value, str) and value.strip().lower() in ("", "none", "off", "0"):
			return None
		return value


def get_settings() -> Settings:
	return Settings()
