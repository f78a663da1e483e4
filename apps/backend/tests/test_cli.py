"""Tests for the command-line interface."""

import json
from pathlib import Path
from unittest.mock import patch

import pytest

from conftest import FakeProvider, completion
from smartskip.cli import _load_transcript, main
from smartskip.services.cache import CacheStore
from smartskip.services.classifier.client import ClassifierClient
from smartskip.services.orchestrator import AnalysisOrchestrator
from smartskip.storage.json_file import JsonFileStore

SPONSOR = completion({"start": 15, "end": 45, "category": "sponsorships", "confidence": 0.95, "description": "VPN"})


@pytest.fixture(autouse=True)
def _quiet_logging():
    with patch("smartskip.cli.configure_logging"):
        yield


def _write_transcript(tmp_path: Path, data: object) -> Path:
    path = tmp_path / "transcript.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def _fake_orchestrator(store_path: Path, provider: FakeProvider) -> AnalysisOrchestrator:
    return AnalysisOrchestrator(CacheStore(JsonFileStore(store_path)), ClassifierClient(provider))


class TestLoadTranscript:
    def test_list_format(self, tmp_path: Path) -> None:
        path = _write_transcript(tmp_path, [{"time": 0, "text": "hi"}])
        transcript = _load_transcript(path, None)
        assert transcript.video_id == "transcript"
        assert transcript.lines[0].text == "hi"

    def test_object_format(self, tmp_path: Path) -> None:
        path = _write_transcript(tmp_path, {"videoId": "xyz", "lines": [{"time": 3, "text": "hi"}]})
        assert _load_transcript(path, None).video_id == "xyz"
        assert _load_transcript(path, "override").video_id == "override"


class TestAnalyzeCommand:
    def test_prints_segments(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        store_path = tmp_path / "store.json"
        path = _write_transcript(tmp_path, [{"time": 15, "text": "sponsored by NordVPN"}])
        orchestrator = _fake_orchestrator(store_path, FakeProvider(SPONSOR))

        with patch("smartskip.cli.build_orchestrator", return_value=orchestrator):
            main(["--store", str(store_path), "analyze", str(path), "--video-id", "abc"])

        out = capsys.readouterr().out
        assert "0:15 - 0:45" in out
        assert "Sponsor" in out
        assert "analysis_abc" in json.loads(store_path.read_text(encoding="utf-8"))

    def test_json_output(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        store_path = tmp_path / "store.json"
        path = _write_transcript(tmp_path, [{"time": 15, "text": "sponsored by NordVPN"}])
        orchestrator = _fake_orchestrator(store_path, FakeProvider(SPONSOR))

        with patch("smartskip.cli.build_orchestrator", return_value=orchestrator):
            main(["--store", str(store_path), "analyze", str(path), "--video-id", "abc", "--json"])

        out = capsys.readouterr().out
        payload = json.loads(out[out.index("{") :])
        assert payload["videoId"] == "abc"

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["--store", str(tmp_path / "s.json"), "analyze", str(tmp_path / "missing.json")])
        assert exc_info.value.code == 1

    def test_classifier_failure(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        store_path = tmp_path / "store.json"
        path = _write_transcript(tmp_path, [{"time": 15, "text": "hello"}])
        orchestrator = _fake_orchestrator(store_path, FakeProvider("garbage"))

        with patch("smartskip.cli.build_orchestrator", return_value=orchestrator):
            with pytest.raises(SystemExit) as exc_info:
                main(["--store", str(store_path), "analyze", str(path)])
        assert exc_info.value.code == 1
        assert "unreadable answer" in capsys.readouterr().err


class TestCacheCommand:
    def _seed(self, store_path: Path) -> None:
        store_path.write_text(
            json.dumps(
                {
                    "analysis_old": {
                        "videoId": "old",
                        "segments": [{"start": 0, "end": 5, "category": "Intro"}],
                        "metadata": {"analyzedAt": "2020-01-01T00:00:00Z"},
                    },
                    "analysis_new": {
                        "videoId": "new",
                        "segments": [],
                        "metadata": {"analyzedAt": "2099-01-01T00:00:00Z"},
                    },
                }
            ),
            encoding="utf-8",
        )

    def test_stats(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        store_path = tmp_path / "store.json"
        self._seed(store_path)
        main(["--store", str(store_path), "cache", "stats"])
        stats = json.loads(capsys.readouterr().out)
        assert stats["total_entries"] == 2
        assert stats["stale_entries"] == 1

    def test_sweep(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        store_path = tmp_path / "store.json"
        self._seed(store_path)
        main(["--store", str(store_path), "cache", "sweep"])
        assert "Deleted 1" in capsys.readouterr().out
        assert list(json.loads(store_path.read_text(encoding="utf-8"))) == ["analysis_new"]

    def test_invalidate_and_clear(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        store_path = tmp_path / "store.json"
        self._seed(store_path)
        main(["--store", str(store_path), "cache", "invalidate", "old"])
        main(["--store", str(store_path), "cache", "clear"])
        out = capsys.readouterr().out
        assert "Invalidated old" in out
        assert "Cleared 1 entries" in out

    def test_missing_subcommand(self) -> None:
        with pytest.raises(SystemExit):
            main(["cache"])


def test_no_command() -> None:
    with pytest.raises(SystemExit) as exc_info:
        main([])
    assert exc_info.value.code == 1
