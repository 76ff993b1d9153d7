import pytest

from spark_client.providers import create_provider
from spark_client.providers.registry import get_model_config
from spark_client.providers.spark_client import SparkClient


class DummySettings:
    spark_app_id = "app"
    spark_api_key = "key-1234567890"
    spark_api_secret = "secret-1234567890"
    spark_api_version = "v1.1"
    spark_endpoint = "wss://proxy.example.com/v1.1/chat"
    spark_timeout = 30.0
    default_user_id = "uid"


def test_create_provider_default(monkeypatch):
    monkeypatch.setattr("spark_client.providers.settings", DummySettings())
    provider = create_provider()
    assert isinstance(provider, SparkClient)
    assert provider.default_endpoint == "wss://proxy.example.com/v1.1/chat"


def test_create_provider_unknown(monkeypatch):
    monkeypatch.setattr("spark_client.providers.settings", DummySettings())
    with pytest.raises(KeyError):
        create_provider("kimi")


def test_get_model_config_accepts_bare_version():
    assert get_model_config("1.1").endpoint == "wss://spark-api.xf-yun.com/v1.1/chat"
    assert get_model_config("V1.1").domain == "general"
