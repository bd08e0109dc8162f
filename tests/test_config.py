"""Tests for configuration model and loading."""

import pytest

from s3_deployer.api.exceptions import ConfigError
from s3_deployer.constants import DEFAULT_RETRY_DELAYS, DEFAULT_UPLOAD_WORKERS, StorageType
from s3_deployer.models.config import DeployerConfig
from s3_deployer.services.config_service import ConfigService


class TestDeployerConfig:
    """Tests for DeployerConfig validation."""

    def test_defaults(self) -> None:
        config = DeployerConfig.from_dict({"bucket": "assets", "app_path": "/myapp/"})

        assert config.app_path == "myapp"
        assert config.current_path == "current"
        assert config.storage == StorageType.S3
        assert config.gzip is False
        assert config.time_zone == "UTC"
        assert config.upload_workers == DEFAULT_UPLOAD_WORKERS
        assert config.retry_delays == tuple(float(d) for d in DEFAULT_RETRY_DELAYS)

    @pytest.mark.parametrize("data", [
        {"app_path": "myapp"},
        {"bucket": "assets"},
        {"bucket": "assets", "app_path": "myapp", "storage_type": "ftp"},
        {"bucket": "assets", "app_path": "myapp", "storage_type": "filesystem"},
        {"bucket": "assets", "app_path": "myapp", "upload_workers": 0},
        {"bucket": "assets", "app_path": "myapp", "time_zone": "Mars/Olympus"},
        {"bucket": "assets", "app_path": "myapp", "hooks": {"before_lunch": "echo"}},
        {"bucket": "assets", "app_path": "myapp", "upload_workers": "many"},
        {"bucket": "assets", "app_path": "myapp", "retry_delays": 5},
        {"bucket": "assets", "app_path": "myapp", "retry_delays": "1,3,8"},
        {"bucket": "assets", "app_path": "myapp", "retry_delays": ["soon"]},
    ])
    def test_invalid(self, data) -> None:
        with pytest.raises(ConfigError):
            DeployerConfig.from_dict(data)

    def test_not_a_mapping(self) -> None:
        with pytest.raises(ConfigError):
            DeployerConfig.from_dict(["bucket"])

    @pytest.mark.parametrize("current_path", ["revisions", "/revisions/live", "SHAS", "CURRENT_REVISION"])
    def test_current_path_overlapping_bookkeeping(self, current_path) -> None:
        with pytest.raises(ConfigError):
            DeployerConfig(bucket="assets", app_path="myapp", current_path=current_path)

    @pytest.mark.parametrize("current_path,expected", [("", ""), ("/live/", "live"), ("www/revisions", "www/revisions")])
    def test_current_path_accepted(self, current_path, expected) -> None:
        config = DeployerConfig(bucket="assets", app_path="myapp", current_path=current_path)
        assert config.current_path == expected

    def test_numeric_strings_from_yaml(self) -> None:
        config = DeployerConfig.from_dict({
            "bucket": "assets", "app_path": "myapp", "upload_workers": "8", "retry_delays": ["0.5", 2],
        })

        assert config.upload_workers == 8
        assert config.retry_delays == (0.5, 2.0)

    def test_gzip_pattern_string_becomes_list(self) -> None:
        config = DeployerConfig(bucket="assets", app_path="myapp", gzip=r"\.js$")
        assert config.gzip == [r"\.js$"]

    def test_to_dict_leaves_out_credentials(self) -> None:
        config = DeployerConfig(
            bucket="assets",
            app_path="myapp",
            access_key_id="AKIA",
            secret_access_key="secret",
            hooks={"after_switch": "echo done"},
        )

        data = config.to_dict()

        assert "access_key_id" not in data
        assert "secret_access_key" not in data
        assert data["hooks"] == {"after_switch": "echo done"}
        assert DeployerConfig.from_dict(data).hooks == config.hooks

    def test_display_info(self, tmp_path) -> None:
        s3 = DeployerConfig(bucket="assets", app_path="myapp", region="us-east-1")
        fs = DeployerConfig(bucket="assets", app_path="myapp", storage_type="filesystem",
                            base_path=str(tmp_path))

        assert s3.get_display_info() == "S3: assets/myapp (us-east-1)"
        assert fs.get_display_info().startswith("Filesystem: ")


class TestConfigService:
    """Tests for loading the YAML configuration file."""

    def test_loads_project_file_with_env_expansion(self, tmp_path, monkeypatch) -> None:
        monkeypatch.setenv("DEPLOY_SECRET", "s3cr3t")
        (tmp_path / ".s3-deployer.yaml").write_text(
            "bucket: assets\n"
            "app_path: myapp\n"
            "secret_access_key: ${DEPLOY_SECRET}\n"
            "gzip:\n"
            "  - '\\.js$'\n"
        )

        config = ConfigService(tmp_path).load_config()

        assert config.bucket == "assets"
        assert config.secret_access_key == "s3cr3t"
        assert config.gzip == [r"\.js$"]

    def test_explicit_path_and_overrides(self, tmp_path) -> None:
        path = tmp_path / "deploy.yaml"
        path.write_text("bucket: assets\napp_path: myapp\ndist_dir: build\n")

        service = ConfigService(tmp_path, config_path=path)
        config = service.load_config(overrides={"dist_dir": "out", "region": None})

        assert config.dist_dir == "out"
        assert config.region is None
        assert service.config is config

    def test_env_config_path(self, tmp_path, monkeypatch) -> None:
        path = tmp_path / "elsewhere.yaml"
        path.write_text("bucket: assets\napp_path: myapp\n")
        monkeypatch.setenv("S3_DEPLOYER_CONFIG", str(path))

        assert ConfigService(tmp_path).config_path == path

    def test_missing_file(self, tmp_path, monkeypatch) -> None:
        monkeypatch.delenv("S3_DEPLOYER_CONFIG", raising=False)

        with pytest.raises(ConfigError):
            ConfigService(tmp_path).load_config()

    def test_invalid_yaml(self, tmp_path) -> None:
        path = tmp_path / "bad.yaml"
        path.write_text("bucket: [unclosed\n")

        with pytest.raises(ConfigError):
            ConfigService(config_path=path).load_config()

    def test_not_a_mapping(self, tmp_path) -> None:
        path = tmp_path / "list.yaml"
        path.write_text("- bucket\n- app_path\n")

        with pytest.raises(ConfigError):
            ConfigService(config_path=path).load_config()
