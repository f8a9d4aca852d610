import pytest

from mediaworker.config import DEFAULT_STAGE_TIMEOUT, FAL_QUEUE_URL, Settings

ENV_VARS = [
    "FAL_API_KEY",
    "FAL_KEY",
    "AWS_ACCESS_KEY_ID",
    "AWS_SECRET_ACCESS_KEY",
    "AWS_REGION",
    "STAGE_TIMEOUT_SECONDS",
    "FAL_POLL_INTERVAL",
    "FAL_QUEUE_URL",
    "CORS_ORIGINS",
    "LOG_LEVEL",
    "PORT",
]


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return str(tmp_path / "missing.env")


class TestSettingsFromEnv:

    def test_defaults(self, clean_env):
        settings = Settings.from_env(clean_env)

        assert settings.fal_api_key == ""
        assert settings.fal_queue_url == FAL_QUEUE_URL
        assert settings.stage_timeout == DEFAULT_STAGE_TIMEOUT
        assert settings.cors_origins == ["*"]
        assert settings.log_level == "INFO"
        assert settings.missing_generation_credentials() == ["FAL_API_KEY"]
        assert settings.missing_ocr_credentials() == [
            "AWS_ACCESS_KEY_ID",
            "AWS_SECRET_ACCESS_KEY",
            "AWS_REGION",
        ]

    def test_reads_credentials(self, clean_env, monkeypatch):
        monkeypatch.setenv("FAL_API_KEY", "fal")
        monkeypatch.setenv("AWS_ACCESS_KEY_ID", "id")
        monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "secret")
        monkeypatch.setenv("AWS_REGION", "us-east-1")

        settings = Settings.from_env(clean_env)

        assert settings.missing_generation_credentials() == []
        assert settings.missing_ocr_credentials() == []

    def test_fal_key_fallback(self, clean_env, monkeypatch):
        monkeypatch.setenv("FAL_KEY", "legacy")

        assert Settings.from_env(clean_env).fal_api_key == "legacy"

    def test_partial_aws_credentials(self, clean_env, monkeypatch):
        monkeypatch.setenv("AWS_ACCESS_KEY_ID", "id")
        monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "secret")

        assert Settings.from_env(clean_env).missing_ocr_credentials() == ["AWS_REGION"]

    def test_tuning_values(self, clean_env, monkeypatch):
        monkeypatch.setenv("STAGE_TIMEOUT_SECONDS", "30")
        monkeypatch.setenv("FAL_POLL_INTERVAL", "0.5")
        monkeypatch.setenv("CORS_ORIGINS", "http://localhost:3000, https://app.example.com")
        monkeypatch.setenv("LOG_LEVEL", "debug")
        monkeypatch.setenv("PORT", "9000")

        settings = Settings.from_env(clean_env)

        assert settings.stage_timeout == 30
        assert settings.fal_poll_interval == 0.5
        assert settings.cors_origins == ["http://localhost:3000", "https://app.example.com"]
        assert settings.log_level == "DEBUG"
        assert settings.port == 9000

    def test_bad_number_falls_back_to_default(self, clean_env, monkeypatch):
        monkeypatch.setenv("STAGE_TIMEOUT_SECONDS", "forever")

        assert Settings.from_env(clean_env).stage_timeout == DEFAULT_STAGE_TIMEOUT

    def test_reads_dotenv_file(self, clean_env, monkeypatch, tmp_path):
        # load_dotenv writes to os.environ; register the key so teardown removes it
        monkeypatch.setenv("FAL_API_KEY", "placeholder")
        monkeypatch.delenv("FAL_API_KEY")
        env_file = tmp_path / ".env"
        env_file.write_text("FAL_API_KEY=from-file\n")

        assert Settings.from_env(str(env_file)).fal_api_key == "from-file"
