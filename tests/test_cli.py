import json

import pytest

import weather_sdk.__main__ as cli
from weather_sdk.client import WeatherData
from weather_sdk.core import get_instance
from weather_sdk.exceptions import CityNotFoundError


@pytest.fixture
def wired_cli(monkeypatch, registry, tmp_path, weather_payload):
    """Route the CLI to a test registry and a fake fetcher."""

    monkeypatch.chdir(tmp_path)
    calls = []

    def fetcher(city: str) -> WeatherData:
        calls.append(city)
        if city.lower() == "atlantis":
            raise CityNotFoundError(f"City not found: {city}", status_code=404)
        return WeatherData.model_validate({**weather_payload, "name": city})

    def fake_get_instance(config, *, settings=None):
        return get_instance(config, fetcher=fetcher, settings=settings, registry=registry)

    monkeypatch.setattr(cli, "get_instance", fake_get_instance)
    return calls


def test_prints_summary_and_uses_cache(wired_cli, capsys, registry):
    code = cli.main(["--api-key", "cli-key", "Tokyo", "Lima"])

    assert code == 0
    lines = capsys.readouterr().out.strip().splitlines()
    assert [json.loads(line)["name"] for line in lines] == ["Tokyo", "Lima"]
    assert wired_cli == ["Tokyo", "Lima"]
    assert "cli-key" not in registry


def test_reports_lookup_errors(wired_cli, capsys):
    code = cli.main(["--api-key", "cli-key", "Atlantis", "Tokyo"])

    captured = capsys.readouterr()
    assert code == 1
    assert "CityNotFoundError" in captured.err
    assert json.loads(captured.out.strip())["name"] == "Tokyo"


def test_api_key_falls_back_to_environment(wired_cli, monkeypatch, capsys):
    monkeypatch.setenv("OPENWEATHER_API_KEY", "env-key")

    assert cli.main(["--mode", "polling", "Oslo"]) == 0
    assert json.loads(capsys.readouterr().out)["name"] == "Oslo"


def test_missing_api_key_exits_with_usage_error(wired_cli, monkeypatch, capsys):
    monkeypatch.delenv("OPENWEATHER_API_KEY", raising=False)

    assert cli.main(["Tokyo"]) == 2
    assert "API key not provided" in capsys.readouterr().err
    assert wired_cli == []
