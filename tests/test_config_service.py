"""Tests for ConfigService."""

import yaml

from ghostty_tracker.models.config import AppConfig, ProjectConfig
from ghostty_tracker.services.config_service import (
    ConfigService,
    get_config_service,
    reset_config_service,
)


class TestConfigServiceLoad:
    """Tests for loading configuration."""

    def test_load_defaults_when_no_file(self, temp_dir):
        """Returns default config when file doesn't exist."""
        service = ConfigService(temp_dir / "nonexistent.yaml")
        config = service.load()

        assert config.scan_interval == 1.0
        assert config.api.base_port == 49876
        assert config.projects == []

    def test_load_from_yaml(self, temp_dir):
        """Loads config from YAML file."""
        config_file = temp_dir / "config.yaml"
        config_file.write_text(
            """
projects:
  - name: api
    path: /Users/me/src/api
scan_interval: 2.5
classifier:
  ready_sigils: ["✳", "●"]
api:
  base_port: 50000
"""
        )

        config = ConfigService(config_file).load()

        assert config.projects == [ProjectConfig(name="api", path="/Users/me/src/api")]
        assert config.scan_interval == 2.5
        assert config.classifier.ready_sigils == ["✳", "●"]
        assert config.api.base_port == 50000
        assert config.api.max_port_attempts == 10

    def test_invalid_yaml_uses_defaults(self, temp_dir):
        config_file = temp_dir / "config.yaml"
        config_file.write_text("projects: [unclosed\n")

        config = ConfigService(config_file).load()

        assert config == AppConfig()

    def test_non_mapping_uses_defaults(self, temp_dir):
        config_file = temp_dir / "config.yaml"
        config_file.write_text("- just\n- a list\n")

        assert ConfigService(config_file).load() == AppConfig()

    def test_validation_error_uses_defaults(self, temp_dir):
        """Out-of-range values fall back to defaults rather than crashing."""
        config_file = temp_dir / "config.yaml"
        config_file.write_text("scan_interval: 0\n")

        assert ConfigService(config_file).load().scan_interval == 1.0

    def test_empty_file(self, temp_dir):
        config_file = temp_dir / "config.yaml"
        config_file.write_text("")

        assert ConfigService(config_file).load() == AppConfig()


class TestWorkstreamMigration:
    """Tests for migrating launcher workstreams to projects."""

    def test_workstreams_become_projects(self, temp_dir):
        config_file = temp_dir / "config.yaml"
        config_file.write_text(
            """
workstreams:
  - name: api
    directory: /Users/me/src/api
    theme: Dracula
  - name: web
    path: /Users/me/src/web
  - name: scratch
"""
        )

        config = ConfigService(config_file).load()

        assert [(p.name, p.path) for p in config.projects] == [
            ("api", "/Users/me/src/api"),
            ("web", "/Users/me/src/web"),
        ]

    def test_explicit_projects_take_precedence(self, temp_dir):
        config_file = temp_dir / "config.yaml"
        config_file.write_text(
            """
projects:
  - name: api
    path: /Users/me/api-v2
workstreams:
  - name: api
    directory: /Users/me/api
"""
        )

        config = ConfigService(config_file).load()

        assert [(p.name, p.path) for p in config.projects] == [("api", "/Users/me/api-v2")]


class TestConfigServiceSave:
    def test_save_and_reload(self, temp_dir):
        config_file = temp_dir / "nested" / "config.yaml"
        service = ConfigService(config_file)
        config = AppConfig(projects=[ProjectConfig(name="api", path="/p")], scan_interval=3)

        assert service.save(config) is True

        data = yaml.safe_load(config_file.read_text())
        assert data["projects"] == [{"name": "api", "path": "/p"}]
        assert service.reload().scan_interval == 3

    def test_save_without_config(self, temp_dir):
        assert ConfigService(temp_dir / "config.yaml").save() is False


class TestConfigServiceSingleton:
    def test_get_config_caches(self, temp_dir):
        config_file = temp_dir / "config.yaml"
        config_file.write_text("scan_interval: 2\n")
        service = ConfigService(config_file)

        first = service.get_config()
        config_file.write_text("scan_interval: 5\n")

        assert service.get_config() is first
        assert service.reload().scan_interval == 5

    def test_singleton(self, temp_dir):
        service = get_config_service(temp_dir / "config.yaml")
        assert get_config_service() is service

        reset_config_service()
        assert get_config_service(temp_dir / "other.yaml") is not service
