"""
Configuration loader module.

Loads reconciliation job definitions from a JSON file:

    {
      "jobs": [
        {
          "name": "ECs",
          "target_table": "EC Closeouts",
          "source_table": "RAW EC Closeouts",
          "key_spec": {"target_field": "EC Number", "parts": ["EC Number"]},
          "field_map": ["Days Due", ["Target Header", "Raw Header"]]
        }
      ]
    }

Jobs from the file are merged over the built-in registry.
"""

import json
import logging
from pathlib import Path
from typing import Dict, List, Optional

from pydantic import ValidationError

from rawsync.domain.errors import ConfigurationError
from rawsync.domain.job_registry import JOB_REGISTRY
from rawsync.domain.job_spec import JobSpec

logger = logging.getLogger(__name__)


class ConfigLoader:
    """
    Load and validate job configuration files.
    """

    def __init__(self, config_path: Optional[str | Path] = None):
        """
        Args:
            config_path: JSON file with job definitions; None uses only
                the built-in jobs
        """
        self.config_path = Path(config_path) if config_path else None

    def _load_json_file(self, filepath: Path) -> dict:
        """
        Load and parse a JSON file with clear error messages.

        Raises:
            FileNotFoundError: If the file doesn't exist
            PermissionError: If the file cannot be read
            ValueError: If the file is empty or not valid JSON
        """
        if not filepath.exists():
            raise FileNotFoundError(
                f"Configuration file not found: {filepath}\n"
                f"Hint: Copy config/reconcile_jobs.example.json and customize it."
            )

        try:
            content = filepath.read_text(encoding="utf-8")
        except PermissionError as e:
            raise PermissionError(
                f"Cannot read config file (permission denied): {filepath}"
            ) from e

        if not content.strip():
            raise ValueError(f"Configuration file is empty: {filepath}")

        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            raise ValueError(
                f"Invalid JSON in config file: {filepath}\n"
                f"Error at line {e.lineno}, column {e.colno}: {e.msg}"
            ) from e

        if not isinstance(data, dict):
            raise ValueError(f'Config file must hold an object with a "jobs" list: {filepath}')
        return data

    def load_file_jobs(self) -> List[JobSpec]:
        """
        Parse the jobs declared in the config file.

        Raises:
            ConfigurationError: If a job definition is invalid
        """
        if self.config_path is None:
            return []

        logger.info("Loading jobs from: %s", self.config_path)
        data = self._load_json_file(self.config_path)

        jobs = []
        for i, item in enumerate(data.get("jobs", []), start=1):
            try:
                jobs.append(JobSpec.model_validate(item))
            except ValidationError as e:
                name = item.get("name", f"#{i}") if isinstance(item, dict) else f"#{i}"
                raise ConfigurationError(
                    f"Invalid job {name} in {self.config_path}: {e}",
                    details={"job": name, "path": str(self.config_path)},
                ) from e

        logger.info("Loaded %d job(s)", len(jobs))
        return jobs

    def load_jobs(self) -> Dict[str, JobSpec]:
        """Built-in jobs overlaid with the config file's jobs, by name."""
        jobs = dict(JOB_REGISTRY)
        for job in self.load_file_jobs():
            if job.name in jobs:
                logger.debug("Config job %s overrides the built-in definition", job.name)
            jobs[job.name] = job
        return jobs

    def get_job(self, name: str) -> JobSpec:
        """
        Resolve a job by name (case-insensitive).

        Raises:
            ConfigurationError: If no job has that name
        """
        jobs = self.load_jobs()
        if name in jobs:
            return jobs[name]
        for job_name, job in jobs.items():
            if job_name.lower() == name.lower():
                return job
        raise ConfigurationError(
            f'Unknown job "{name}". Available: {", ".join(sorted(jobs))}',
            details={"job": name},
        )
