"""
Tests for ConfigLoader.
"""

import json
from pathlib import Path

import pytest

from rawsync.domain.errors import ConfigurationError
from rawsync.domain.job_registry import JOB_REGISTRY
from rawsync.domain.job_spec import DuplicateKeyPolicy
from rawsync.infrastructure.config_loader import ConfigLoader

EXAMPLE_CONFIG = Path(__file__).parents[1] / "config" / "reconcile_jobs.example.json"


def _write(tmp_path, data):
    path = tmp_path / "jobs.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


class TestLoadJobs:
    def test_no_config_means_builtin_jobs(self):
        loader = ConfigLoader()
        assert loader.load_file_jobs() == []
        assert loader.load_jobs() == JOB_REGISTRY

    def test_file_jobs_are_added(self, tmp_path):
        path = _write(
            tmp_path,
            {
                "jobs": [
                    {
                        "name": "Punchlist",
                        "target_table": "Punchlist",
                        "source_table": "RAW Punchlist",
                        "key_spec": {"target_field": "Item", "parts": ["Item"]},
                        "field_map": ["Owner", ["Due", "Due Date"]],
                    }
                ]
            },
        )

        jobs = ConfigLoader(path).load_jobs()

        assert "Punchlist" in jobs
        assert "ECs" in jobs
        assert [m.source_field for m in jobs["Punchlist"].field_map] == ["Owner", "Due Date"]

    def test_file_job_overrides_builtin(self, tmp_path):
        path = _write(
            tmp_path,
            {
                "jobs": [
                    {
                        "name": "ECs",
                        "target_table": "EC Closeouts",
                        "source_table": "RAW EC Closeouts (new)",
                        "key_spec": {"target_field": "EC Number", "parts": ["EC Number"]},
                    }
                ]
            },
        )

        job = ConfigLoader(path).get_job("ecs")

        assert job.source_table == "RAW EC Closeouts (new)"
        assert job.field_map == ()

    def test_example_config_is_valid(self):
        jobs = ConfigLoader(EXAMPLE_CONFIG).load_file_jobs()
        by_name = {j.name: j for j in jobs}

        assert set(by_name) == {"Punchlist", "Work Packages"}
        assert by_name["Punchlist"].duplicate_policy == DuplicateKeyPolicy.REJECT
        assert by_name["Work Packages"].derived_field is not None


class TestErrors:
    def test_unknown_job(self):
        with pytest.raises(ConfigurationError, match="Unknown job"):
            ConfigLoader().get_job("Nope")

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError, match="not found"):
            ConfigLoader(tmp_path / "absent.json").load_jobs()

    def test_empty_file(self, tmp_path):
        path = tmp_path / "jobs.json"
        path.write_text("  \n", encoding="utf-8")
        with pytest.raises(ValueError, match="empty"):
            ConfigLoader(path).load_jobs()

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "jobs.json"
        path.write_text('{"jobs": [', encoding="utf-8")
        with pytest.raises(ValueError, match="Invalid JSON"):
            ConfigLoader(path).load_jobs()

    def test_top_level_must_be_object(self, tmp_path):
        path = _write(tmp_path, [1, 2])
        with pytest.raises(ValueError, match="jobs"):
            ConfigLoader(path).load_jobs()

    def test_invalid_job_names_the_job(self, tmp_path):
        path = _write(
            tmp_path,
            {"jobs": [{"name": "Broken", "target_table": "T", "source_table": "T", "key_spec": {}}]},
        )
        with pytest.raises(ConfigurationError, match="Broken") as exc:
            ConfigLoader(path).load_jobs()
        assert exc.value.details["job"] == "Broken"
