"""
Tests for environment loading and duration parsing.
"""

import pytest
from pydantic import ValidationError

from peerfinder.env import Env, TimeParser, load_env


ENV_NAMES = list(Env.types_map())


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch, tmp_path):
    for name in ENV_NAMES:
        monkeypatch.delenv(name, raising=False)

    # Keep a stray .env in the invoking directory out of the defaults.
    monkeypatch.chdir(tmp_path)


class TestLoadEnv:
    """Tests for load_env() precedence."""

    def test_defaults(self):
        env = load_env()

        assert env.POD_NAMESPACE is None
        assert env.PEER_FINDER_RESOLV_CONF == "/etc/resolv.conf"
        assert env.PEER_FINDER_LOG_LEVEL == "info"
        assert env.PEER_FINDER_LOG_OUTPUT == "stderr"
        assert env.poll_interval_seconds == 1.0
        assert env.dns_timeout_seconds == 5.0

    def test_process_environment(self, monkeypatch):
        monkeypatch.setenv("POD_NAMESPACE", "ns1")
        monkeypatch.setenv("PEER_FINDER_LOG_LEVEL", "DEBUG")

        env = load_env()

        assert env.POD_NAMESPACE == "ns1"
        assert env.PEER_FINDER_LOG_LEVEL == "debug"

    def test_empty_variable_is_ignored(self, monkeypatch):
        monkeypatch.setenv("POD_NAMESPACE", "")

        assert load_env().POD_NAMESPACE is None

    def test_env_file_beats_process_environment(self, monkeypatch, tmp_path):
        monkeypatch.setenv("POD_NAMESPACE", "from-process")
        env_file = tmp_path / "peer-finder.env"
        env_file.write_text(
            "POD_NAMESPACE=from-file\n"
            "PEER_FINDER_POLL_INTERVAL=0.25s\n"
            "UNRELATED=value\n"
        )

        env = load_env(env_file=str(env_file))

        assert env.POD_NAMESPACE == "from-file"
        assert env.PEER_FINDER_POLL_INTERVAL == "0.25s"

    def test_default_env_file_is_read(self, tmp_path):
        (tmp_path / ".env").write_text("PEER_FINDER_DNS_TIMEOUT=2s\n")

        assert load_env().dns_timeout_seconds == 2.0

    def test_missing_env_file_is_ignored(self, tmp_path):
        env = load_env(env_file=str(tmp_path / "missing.env"))

        assert env.PEER_FINDER_RESOLV_CONF == "/etc/resolv.conf"

    def test_override_beats_everything(self, monkeypatch):
        monkeypatch.setenv("POD_NAMESPACE", "from-process")

        env = load_env(
            override={
                "POD_NAMESPACE": "from-flag",
                "PEER_FINDER_RESOLV_CONF": None,
            }
        )

        assert env.POD_NAMESPACE == "from-flag"
        assert env.PEER_FINDER_RESOLV_CONF == "/etc/resolv.conf"

    def test_empty_override_keeps_lower_layer(self, monkeypatch):
        monkeypatch.setenv("POD_NAMESPACE", "from-process")

        env = load_env(override={"POD_NAMESPACE": ""})

        assert env.POD_NAMESPACE == "from-process"

    def test_invalid_log_level_is_rejected(self, monkeypatch):
        monkeypatch.setenv("PEER_FINDER_LOG_LEVEL", "verbose")

        with pytest.raises(ValidationError):
            load_env()


class TestTimeParser:
    """Tests for duration strings."""

    @pytest.mark.parametrize(
        "duration,seconds",
        [
            ("1s", 1.0),
            ("5", 5.0),
            ("0.5s", 0.5),
            ("2m", 120.0),
            ("1m30s", 90.0),
            ("1h", 3600.0),
        ],
    )
    def test_parse(self, duration, seconds):
        assert TimeParser().parse(duration) == seconds

    @pytest.mark.parametrize(
        "duration",
        ["soon", "", "5x", "abc1s", "1s abc", "250ms", "s"],
    )
    def test_unparseable_duration(self, duration):
        """The whole string must be a duration, not just part of it."""
        with pytest.raises(ValueError):
            TimeParser().parse(duration)

    def test_long_digit_run_is_rejected_promptly(self):
        with pytest.raises(ValueError):
            TimeParser().parse("1" * 64 + "x")
