"""Tests for application settings."""
from inbox_sorter.config import Settings


class TestSettings:
    def test_defaults(self, monkeypatch):
        for name in ("GMAIL_LISTING_QUERY", "BATCH_SIZE", "GMAIL_NUM_RETRIES"):
            monkeypatch.delenv(name, raising=False)
        settings = Settings(_env_file=None)

        assert settings.gmail_listing_query == "label:inbox category:updates"
        assert settings.batch_size == 10
        assert settings.gmail_num_retries == 3
        assert not hasattr(settings, "frontend_url")

    def test_cors_origins_list(self):
        settings = Settings(_env_file=None, cors_origins="http://a, http://b")
        assert settings.cors_origins_list == ["http://a", "http://b"]

    def test_gmail_authenticated_with_either_token(self):
        assert Settings(_env_file=None, google_access_token="t").gmail_authenticated
        assert Settings(_env_file=None, google_refresh_token="r").gmail_authenticated
        assert not Settings(
            _env_file=None, google_access_token="", google_refresh_token=""
        ).gmail_authenticated
