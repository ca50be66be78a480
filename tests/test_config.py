from speedread.config import MAX_WPM, MIN_WPM, WebSettings


class TestWebSettings:
    def test_defaults(self, monkeypatch) -> None:
        for name in ["SPEEDREAD_HOST", "SPEEDREAD_PORT", "SPEEDREAD_DEBUG", "SPEEDREAD_LOG_LEVEL"]:
            monkeypatch.delenv(name, raising=False)
        assert WebSettings.from_env() == WebSettings()

    def test_from_env(self, monkeypatch) -> None:
        """Environment variables override the defaults."""
        monkeypatch.setenv("SPEEDREAD_HOST", "0.0.0.0")
        monkeypatch.setenv("SPEEDREAD_PORT", "8080")
        monkeypatch.setenv("SPEEDREAD_DEBUG", "yes")
        monkeypatch.setenv("SPEEDREAD_LOG_LEVEL", "debug")
        assert WebSettings.from_env() == WebSettings(host="0.0.0.0", port=8080, debug=True, log_level="DEBUG")


def test_wpm_bounds() -> None:
    assert (MIN_WPM, MAX_WPM) == (100, 1500)
