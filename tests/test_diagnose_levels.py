import importlib.util
import sys
from pathlib import Path

from succinct.errors import SourceUnavailable

SCRIPT = Path(__file__).resolve().parents[1] / "scripts" / "diagnose_levels.py"


def _load_script():
    spec = importlib.util.spec_from_file_location("diagnose_levels", SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def test_missing_microphone_reports_and_fails(monkeypatch, capsys):
    module = _load_script()

    def _no_device(_name=None):
        raise SourceUnavailable("No input devices found.")

    monkeypatch.setattr(module, "find_input_device", _no_device)
    monkeypatch.setattr(sys, "argv", ["diagnose_levels.py"])

    assert module.main() == 1
    assert "Microphone unavailable" in capsys.readouterr().out


def test_capture_failure_reports_and_fails(monkeypatch, capsys):
    module = _load_script()

    def _fail(self):
        raise SourceUnavailable("device busy")

    monkeypatch.setattr(module, "find_input_device", lambda _name=None: {"name": "Mic"})
    monkeypatch.setattr(module.EnergySource, "start", _fail)
    monkeypatch.setattr(sys, "argv", ["diagnose_levels.py", "--seconds", "0"])

    assert module.main() == 1
    assert "Could not start capture" in capsys.readouterr().out
