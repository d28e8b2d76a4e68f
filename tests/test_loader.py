"""
Tests for background WAVE loading
"""
import io
import threading

import pytest

from conftest import build_wave
from wavpeek.utils.config import WavpeekConfig
from wavpeek.wave import ReadyState, WaveLoader, WaveParser, read_wave, DATA_NOT_FOUND, READ_FAILED


class BlockingReader:
    """File-like object whose read waits for a signal"""

    def __init__(self, data):
        self.data = data
        self.release = threading.Event()

    def read(self):
        self.release.wait(5)
        return self.data


class TestReadWave:
    """Tests for synchronous reading"""

    def test_from_path(self, tmp_path, sine_wave):
        """Test reading from a path"""
        path = tmp_path / 'tone.wav'
        path.write_bytes(sine_wave)
        wave = read_wave(path)
        assert wave.state == ReadyState.DONE
        assert len(wave.samples) == 16000

        assert read_wave(str(path)).data_offset == 44

    def test_from_file_object(self, sine_wave):
        """Test reading from a binary file-like object"""
        wave = read_wave(io.BytesIO(sine_wave))
        assert wave.state == ReadyState.DONE

    def test_with_config(self):
        """Test parser settings are applied"""
        wave = read_wave(build_wave(bytes(6), bits=24), WavpeekConfig(strict_encoding=True))
        assert wave.state == ReadyState.UNSUPPORTED_FORMAT

    def test_text_file_rejected(self):
        """Test text-mode sources"""
        with pytest.raises(TypeError):
            read_wave(io.StringIO('RIFF'))

    def test_unsupported_source(self):
        """Test unsupported source types"""
        with pytest.raises(TypeError):
            read_wave(42)

    def test_missing_file(self, tmp_path):
        """Test read errors propagate"""
        with pytest.raises(FileNotFoundError):
            read_wave(tmp_path / 'missing.wav')


class TestWaveLoader:
    """Tests for WaveLoader"""

    def test_buffer_resolves_immediately(self, sine_wave):
        """Test bytes sources are parsed without a read step"""
        calls = []
        with WaveLoader() as loader:
            load = loader.load(sine_wave, on_load_end=calls.append)
            assert load.done()
            assert load.state == ReadyState.DONE
            assert load.result() is load.wave
        assert calls == [load.wave]

    def test_path_load(self, tmp_path, sine_wave):
        """Test loading a path on the worker pool"""
        path = tmp_path / 'tone.wav'
        path.write_bytes(sine_wave)
        calls = []

        with WaveLoader() as loader:
            load = loader.load(path, on_load_end=calls.append)
            wave = load.result(timeout=5)

        assert wave.state == ReadyState.DONE
        assert wave is load.wave
        assert calls == [wave]

    def test_loading_state(self, sine_wave):
        """Test the WaveFile reports LOADING while the read is pending"""
        reader = BlockingReader(sine_wave)

        with WaveLoader() as loader:
            load = loader.load(reader)
            assert load.state == ReadyState.LOADING
            assert not load.done()
            reader.release.set()
            assert load.result(timeout=5).state == ReadyState.DONE

    def test_classified_failure(self):
        """Test format failures resolve the future normally"""
        calls = []
        with WaveLoader() as loader:
            load = loader.load(io.BytesIO(build_wave(None)), on_load_end=calls.append)
            wave = load.result(timeout=5)

        assert wave.state == ReadyState.UNSUPPORTED_FORMAT
        assert wave.error == DATA_NOT_FOUND
        assert len(calls) == 1

    def test_read_error(self, tmp_path):
        """Test a failed read ends the load and still fires the callback"""
        calls = []
        with WaveLoader() as loader:
            load = loader.load(tmp_path / 'missing.wav', on_load_end=calls.append)
            with pytest.raises(FileNotFoundError):
                load.result(timeout=5)

        assert load.done()
        assert load.state == ReadyState.UNSUPPORTED_FORMAT
        assert load.wave.error == READ_FAILED
        assert load.wave.samples is None
        assert calls == [load.wave]

    def test_text_file_read_error(self):
        """Test a text-mode source ends the load with READ_FAILED"""
        calls = []
        with WaveLoader() as loader:
            load = loader.load(io.StringIO('RIFF'), on_load_end=calls.append)
            with pytest.raises(TypeError):
                load.result(timeout=5)

        assert load.state == ReadyState.UNSUPPORTED_FORMAT
        assert load.wave.error == READ_FAILED
        assert len(calls) == 1

    def test_unsupported_source(self):
        """Test unsupported sources fail before submission"""
        with WaveLoader() as loader:
            with pytest.raises(TypeError):
                loader.load(3.14)

    def test_custom_parser(self):
        """Test the loader uses the given parser"""
        parser = WaveParser(WavpeekConfig(strict_encoding=True, max_workers=2))
        with WaveLoader(parser) as loader:
            wave = loader.load(io.BytesIO(build_wave(bytes(6), bits=24))).result(timeout=5)
        assert wave.state == ReadyState.UNSUPPORTED_FORMAT

    def test_many_loads(self, tmp_path, sine_wave):
        """Test several loads resolve independently"""
        paths = []
        for i in range(4):
            path = tmp_path / f'tone_{i}.wav'
            path.write_bytes(sine_wave)
            paths.append(path)

        with WaveLoader(max_workers=2) as loader:
            loads = [loader.load(p) for p in paths]
            waves = [load.result(timeout=5) for load in loads]

        assert all(w.state == ReadyState.DONE for w in waves)
        assert len({id(w) for w in waves}) == 4
