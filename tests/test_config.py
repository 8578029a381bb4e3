import pydantic
import pytest

from config import Settings


class TestSettings:

    def test_log_level_is_normalised(self):
        settings = Settings(jwt_secret="s", log_level=" debug ")
        assert settings.log_level == "DEBUG"

    def test_unknown_log_level_rejected(self):
        with pytest.raises(pydantic.ValidationError) as excinfo:
            Settings(jwt_secret="s", log_level="verbose")
        assert "log_level" in str(excinfo.value)

    def test_allowed_origins_split_on_commas(self):
        settings = Settings(jwt_secret="s", client_origin="http://a.test, http://b.test,")
        assert settings.allowed_origins == ["http://a.test", "http://b.test"]
