import os

import pytest

from task_tracker.utils import env_float, env_int, load_local_env


def test_env_int_defaults_and_parses(monkeypatch):
    monkeypatch.delenv("TASK_TEST_INT", raising=False)
    assert env_int("TASK_TEST_INT", 5) == 5

    monkeypatch.setenv("TASK_TEST_INT", "42")
    assert env_int("TASK_TEST_INT", 5) == 42


def test_env_int_rejects_garbage(monkeypatch):
    monkeypatch.setenv("TASK_TEST_INT", "forty-two")
    with pytest.raises(ValueError, match="TASK_TEST_INT must be an integer"):
        env_int("TASK_TEST_INT", 5)


def test_env_float(monkeypatch):
    monkeypatch.setenv("TASK_TEST_FLOAT", "0.5")
    assert env_float("TASK_TEST_FLOAT", 1.0) == 0.5


def test_load_local_env_does_not_override(monkeypatch, tmp_path):
    monkeypatch.delenv("TASK_TRACKER_SKIP_DOTENV", raising=False)
    monkeypatch.setenv("TASK_API_URL", "http://from-environment")
    dotenv = tmp_path / ".env"
    dotenv.write_text("TASK_API_URL=http://from-file\nTASK_TEST_FROM_FILE=yes\n")
    monkeypatch.delenv("TASK_TEST_FROM_FILE", raising=False)

    assert load_local_env(dotenv) is True
    assert os.environ["TASK_API_URL"] == "http://from-environment"
    assert os.environ["TASK_TEST_FROM_FILE"] == "yes"
    os.environ.pop("TASK_TEST_FROM_FILE", None)


def test_missing_dotenv_is_not_an_error(monkeypatch, tmp_path):
    monkeypatch.delenv("TASK_TRACKER_SKIP_DOTENV", raising=False)
    assert load_local_env(tmp_path / ".env") is False
