"""Unit tests for configuration loading."""

import pytest
import yaml

from vagabond.config_manager import ConfigManager, load_config, require_host
from vagabond.config_schema import (
    CassandraConfig, LogLevel, MultiRowPolicy, PointerWriteMode, VagabondConfig
)
from vagabond.exceptions import ConfigurationError


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path, monkeypatch):
    """Keep stray vagabond.yaml / .env files of the developer out of the tests."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


def write_yaml(path, data):
    path.write_text(yaml.safe_dump(data), encoding='utf-8')
    return path


class TestDefaults:
    """Test behavior without any configuration file."""

    def test_defaults(self):
        config = load_config(environ={})

        assert config.migrations.manifest_path.as_posix() == 'migrations/vagabond'
        assert config.cassandra.host is None
        assert config.cassandra.keyspace is None
        assert config.pointer.table == 'vagabond'
        assert config.pointer.write_mode == PointerWriteMode.TRUNCATE_INSERT
        assert config.pointer.multi_row_policy == MultiRowPolicy.REJECT

    def test_environment_variables(self):
        config = load_config(environ={
            'CASSANDRA_HOST': '10.0.0.5:9043',
            'CASSANDRA_USER': 'cassandra',
            'CASSANDRA_PASSWORD': 'secret',
            'CASSANDRA_KEYSPACE': 'app',
            'VAGABOND_LOG_LEVEL': 'DEBUG',
        })

        assert config.cassandra.host == '10.0.0.5:9043'
        assert config.cassandra.contact_point() == ('10.0.0.5', 9043)
        assert config.cassandra.username == 'cassandra'
        assert config.cassandra.password == 'secret'
        assert config.cassandra.keyspace == 'app'
        assert config.logging.level == LogLevel.DEBUG

    def test_empty_environment_values_are_ignored(self):
        config = load_config(environ={'CASSANDRA_KEYSPACE': ''})

        assert config.cassandra.keyspace is None


class TestYamlFile:
    """Test YAML file loading and overrides."""

    def test_explicit_file(self, tmp_path):
        path = write_yaml(tmp_path / 'custom.yaml', {
            'migrations': {'directory': 'db/migrations'},
            'pointer': {'table': 'schema_pointer', 'write_mode': 'batch'},
        })

        config = load_config(path, environ={})

        assert config.migrations.directory.as_posix() == 'db/migrations'
        assert config.pointer.table == 'schema_pointer'
        assert config.pointer.write_mode == PointerWriteMode.BATCH

    def test_default_file_in_working_directory(self, tmp_path):
        write_yaml(tmp_path / 'vagabond.yaml', {'cassandra': {'keyspace': 'from_file'}})

        assert load_config(environ={}).cassandra.keyspace == 'from_file'

    def test_config_env_var(self, tmp_path):
        path = write_yaml(tmp_path / 'other.yaml', {'cassandra': {'port': 9999}})

        config = load_config(environ={'VAGABOND_CONFIG': str(path)})

        assert config.cassandra.port == 9999

    def test_environment_wins_over_file(self, tmp_path):
        path = write_yaml(tmp_path / 'c.yaml', {'cassandra': {'keyspace': 'from_file'}})

        config = load_config(path, environ={'CASSANDRA_KEYSPACE': 'from_env'})

        assert config.cassandra.keyspace == 'from_env'

    def test_missing_explicit_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="not found"):
            load_config(tmp_path / 'nope.yaml', environ={})

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / 'bad.yaml'
        path.write_text("cassandra: [unclosed", encoding='utf-8')

        with pytest.raises(ConfigurationError, match="Failed to parse"):
            load_config(path, environ={})

    def test_non_mapping_yaml(self, tmp_path):
        path = tmp_path / 'list.yaml'
        path.write_text("- a\n- b\n", encoding='utf-8')

        with pytest.raises(ConfigurationError, match="mapping"):
            load_config(path, environ={})

    def test_empty_yaml(self, tmp_path):
        path = tmp_path / 'empty.yaml'
        path.write_text("", encoding='utf-8')

        assert isinstance(load_config(path, environ={}), VagabondConfig)

    def test_schema_violation(self, tmp_path):
        path = write_yaml(tmp_path / 'c.yaml', {'pointer': {'multi_row_policy': 'random'}})

        with pytest.raises(ConfigurationError, match="pointer.multi_row_policy"):
            load_config(path, environ={})


class TestDotenv:
    """Test .env handling."""

    def test_dotenv_values_used(self, tmp_path):
        (tmp_path / '.env').write_text("CASSANDRA_HOST=db.local\nCASSANDRA_KEYSPACE=app\n")

        config = load_config(environ={})

        assert config.cassandra.host == 'db.local'
        assert config.cassandra.keyspace == 'app'

    def test_real_environment_wins_over_dotenv(self, tmp_path):
        (tmp_path / '.env').write_text("CASSANDRA_KEYSPACE=from_dotenv\n")

        config = load_config(environ={'CASSANDRA_KEYSPACE': 'from_env'})

        assert config.cassandra.keyspace == 'from_env'

    def test_dotenv_disabled(self, tmp_path):
        (tmp_path / '.env').write_text("CASSANDRA_KEYSPACE=app\n")

        manager = ConfigManager(environ={}, dotenv_path=None)

        assert manager.build().cassandra.keyspace is None


class TestValidation:
    """Test identifier validation and host handling."""

    @pytest.mark.parametrize("keyspace", ["app; DROP KEYSPACE x", "1abc", "a-b", "x" * 49])
    def test_invalid_keyspace(self, keyspace):
        with pytest.raises(ConfigurationError, match="keyspace"):
            load_config(environ={'CASSANDRA_KEYSPACE': keyspace})

    def test_invalid_table(self, tmp_path):
        path = write_yaml(tmp_path / 'c.yaml', {'pointer': {'table': 'vagabond WHERE'}})

        with pytest.raises(ConfigurationError, match="pointer.table"):
            load_config(path, environ={})

    def test_require_host(self):
        with pytest.raises(ConfigurationError, match="CASSANDRA_HOST"):
            require_host(load_config(environ={}))

        assert require_host(load_config(environ={'CASSANDRA_HOST': 'h'})) == 'h'

    @pytest.mark.parametrize("host,expected", [
        ('127.0.0.1', ('127.0.0.1', 9042)),
        ('127.0.0.1:9142', ('127.0.0.1', 9142)),
        ('cassandra.internal', ('cassandra.internal', 9042)),
        ('[::1]:9043', ('::1', 9043)),
        ('[::1]', ('::1', 9042)),
    ])
    def test_contact_point(self, host, expected):
        assert CassandraConfig(host=host).contact_point() == expected
