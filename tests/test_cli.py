"""
Tests for the wavpeek command-line interface
"""
import struct

import pytest
import yaml
from click.testing import CliRunner

from conftest import build_wave
from wavpeek import __version__
from wavpeek.cli.main import cli


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def config_path(tmp_path):
    """Config path that does not exist yet, so defaults apply"""
    return str(tmp_path / 'wavpeek.yaml')


@pytest.fixture
def wav_file(tmp_path):
    path = tmp_path / 'short.wav'
    path.write_bytes(build_wave(struct.pack('<4h', 1, -1, 300, -300)))
    return str(path)


def invoke(runner, config_path, *args):
    return runner.invoke(cli, ['--config', config_path, *args])


class TestCli:
    """Tests for CLI commands"""

    def test_version(self, runner):
        """Test --version"""
        result = runner.invoke(cli, ['--version'])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_info(self, runner, config_path, wav_file):
        """Test header display"""
        result = invoke(runner, config_path, 'info', wav_file)
        assert result.exit_code == 0, result.output
        assert 'RIFF' in result.output
        assert 'DONE' in result.output

    def test_info_unsupported(self, runner, config_path, tmp_path):
        """Test a non-WAVE file exits non-zero"""
        path = tmp_path / 'text.wav'
        path.write_bytes(b'hello world, this is not a RIFF file!!')
        result = invoke(runner, config_path, 'info', str(path))
        assert result.exit_code == 1
        assert 'NOT_SUPPORTED_FORMAT' in result.output

    def test_info_missing_file(self, runner, config_path, tmp_path):
        """Test a missing file exits non-zero"""
        result = invoke(runner, config_path, 'info', str(tmp_path / 'missing.wav'))
        assert result.exit_code == 1

    def test_chunks(self, runner, config_path, wav_file):
        """Test chunk listing"""
        result = invoke(runner, config_path, 'chunks', wav_file)
        assert result.exit_code == 0, result.output
        assert 'fmt' in result.output
        assert 'data' in result.output

    def test_samples(self, runner, config_path, wav_file):
        """Test sample printing"""
        result = invoke(runner, config_path, 'samples', wav_file, '--start', '1', '--count', '2')
        assert result.exit_code == 0, result.output
        assert '-1 300' in result.output

    def test_samples_unsupported_depth(self, runner, config_path, tmp_path):
        """Test sample printing for undecoded bit depths"""
        path = tmp_path / 'deep.wav'
        path.write_bytes(build_wave(bytes(6), bits=24))
        result = invoke(runner, config_path, 'samples', str(path))
        assert result.exit_code == 1

    def test_validate(self, runner, config_path, tmp_path, sine_wave):
        """Test batch validation"""
        good = tmp_path / 'tone.wav'
        good.write_bytes(sine_wave)
        result = invoke(runner, config_path, 'validate', str(good))
        assert result.exit_code == 0, result.output
        assert '1/1' in result.output

        silent = tmp_path / 'silent.wav'
        silent.write_bytes(build_wave(bytes(32000)))
        result = invoke(runner, config_path, 'validate', str(good), str(silent), str(tmp_path / 'gone.wav'))
        assert result.exit_code == 1
        assert '1/3' in result.output

    def test_init_config(self, runner, config_path):
        """Test writing a default config"""
        result = invoke(runner, config_path, 'init-config')
        assert result.exit_code == 0, result.output
        with open(config_path) as f:
            assert yaml.safe_load(f)['scan_mode'] == 'stride'

        result = invoke(runner, config_path, 'init-config')
        assert result.exit_code == 1

        result = invoke(runner, config_path, 'init-config', '--force')
        assert result.exit_code == 0

    def test_config_applied(self, runner, config_path, tmp_path):
        """Test settings from the config file reach the parser"""
        with open(config_path, 'w') as f:
            yaml.dump({'strict_encoding': True}, f)
        path = tmp_path / 'deep.wav'
        path.write_bytes(build_wave(bytes(6), bits=24))

        result = invoke(runner, config_path, 'info', str(path))
        assert result.exit_code == 1
        assert 'UNSUPPORTED_ENCODING' in result.output

    def test_invalid_config(self, runner, config_path, wav_file):
        """Test an invalid config is reported"""
        with open(config_path, 'w') as f:
            yaml.dump({'scan_mode': 'random'}, f)
        result = invoke(runner, config_path, 'info', wav_file)
        assert result.exit_code == 1
        assert 'Invalid config' in result.output
