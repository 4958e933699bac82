import pytest

from rconsole.config.settings import DEFAULT_ADDRESS, ClientConfig, Config, LoggingConfig
from rconsole.utils.exceptions import ConfigurationError


@pytest.fixture
def clean_env(monkeypatch):
    for name in ('RCON_ADDRESS', 'RCON_PASSWORD', 'RCON_CONNECT_TIMEOUT', 'LOG_LEVEL'):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_load_client_config_from_env(clean_env):
    clean_env.setenv('RCON_ADDRESS', 'rcon://mc.example.org:25576')
    clean_env.setenv('RCON_PASSWORD', 'secret')
    clean_env.setenv('RCON_CONNECT_TIMEOUT', '2.5')

    config = Config().load_client_config()
    assert config == ClientConfig('rcon://mc.example.org:25576', 'secret', 2.5)


def test_load_client_config_defaults_address(clean_env):
    clean_env.setenv('RCON_PASSWORD', 'secret')

    config = Config().load_client_config()
    assert config.address == DEFAULT_ADDRESS == 'rcon://127.0.0.1:25575'
    assert config.connect_timeout is None


def test_arguments_override_env(clean_env):
    clean_env.setenv('RCON_ADDRESS', 'rcon://from-env')
    clean_env.setenv('RCON_PASSWORD', 'env-secret')

    cfg = Config()
    config = cfg.load_client_config(address='other:1', password='flag-secret')
    assert (config.address, config.password) == ('other:1', 'flag-secret')
    assert cfg.client is config


def test_missing_password(clean_env):
    with pytest.raises(ConfigurationError):
        Config().load_client_config()


@pytest.mark.parametrize('value', ['soon', '0', '-1', 'nan', 'inf'])
def test_invalid_timeout(clean_env, value):
    clean_env.setenv('RCON_PASSWORD', 'secret')
    clean_env.setenv('RCON_CONNECT_TIMEOUT', value)
    with pytest.raises(ConfigurationError):
        Config().load_client_config()


def test_logging_config(clean_env):
    assert Config().load_logging_config().level == 'INFO'
    clean_env.setenv('LOG_LEVEL', 'debug')
    assert Config().load_logging_config().level == 'debug'
    assert Config().load_logging_config('WARNING').level == 'WARNING'


def test_invalid_log_level():
    with pytest.raises(ConfigurationError):
        LoggingConfig(level='LOUD').validate()
