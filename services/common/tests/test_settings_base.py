"""
Tests for the settings base class
"""

from typing import List, Optional

import pytest

from services.common.settings import AliasChoices, BaseSettings, Field, SettingsConfigDict


class ExampleSettings(BaseSettings):
    name: str = Field(default="svc", validation_alias="EXAMPLE_NAME")
    workers: int = Field(default=2, validation_alias=AliasChoices("EXAMPLE_WORKERS", "WORKERS"))
    ratio: float = 0.5
    enabled: bool = Field(default=False, validation_alias="EXAMPLE_ENABLED")
    tags: List[str] = Field(default=[], validation_alias="EXAMPLE_TAGS")
    token: Optional[int] = Field(default=None, validation_alias="EXAMPLE_TOKEN")

    model_config = SettingsConfigDict(env_file=".env.example-test")


class RequiredSettings(BaseSettings):
    secret: str = Field(..., validation_alias="EXAMPLE_SECRET")


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    for name in (
        "EXAMPLE_NAME",
        "EXAMPLE_WORKERS",
        "WORKERS",
        "RATIO",
        "EXAMPLE_ENABLED",
        "EXAMPLE_TAGS",
        "EXAMPLE_TOKEN",
        "EXAMPLE_SECRET",
        "SECRET",
    ):
        monkeypatch.delenv(name, raising=False)
    return tmp_path


def test_defaults():
    settings = ExampleSettings()

    assert settings.name == "svc"
    assert settings.workers == 2
    assert settings.ratio == 0.5
    assert settings.enabled is False
    assert settings.tags == []
    assert settings.token is None


def test_type_conversion(monkeypatch):
    monkeypatch.setenv("WORKERS", "8")
    monkeypatch.setenv("RATIO", "0.25")
    monkeypatch.setenv("EXAMPLE_ENABLED", "yes")
    monkeypatch.setenv("EXAMPLE_TAGS", "a, b,,c")
    monkeypatch.setenv("EXAMPLE_TOKEN", "7")

    settings = ExampleSettings()

    assert settings.workers == 8
    assert settings.ratio == 0.25
    assert settings.enabled is True
    assert settings.tags == ["a", "b", "c"]
    assert settings.token == 7


def test_json_list(monkeypatch):
    monkeypatch.setenv("EXAMPLE_TAGS", '["x", "y"]')

    assert ExampleSettings().tags == ["x", "y"]


def test_env_file_comments_and_quotes(isolated_env):
    (isolated_env / ".env.example-test").write_text(
        "# comment\nEXAMPLE_NAME='from-file'\n\nEXAMPLE_WORKERS=\"3\"\n"
    )

    settings = ExampleSettings()

    assert settings.name == "from-file"
    assert settings.workers == 3


def test_required_field_missing():
    with pytest.raises(ValueError, match="secret"):
        RequiredSettings()


def test_required_field_from_kwargs():
    assert RequiredSettings(secret="s3cr3t").secret == "s3cr3t"
