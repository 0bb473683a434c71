"""Tests for the command-line driver."""

from __future__ import annotations

import json

import cv2
import pytest

from binarization import cli
from conftest import make_image, split_image


@pytest.fixture
def log_dir(tmp_path, monkeypatch):
    target = tmp_path / "logs"
    monkeypatch.setattr(cli, "LOG_DIR", target)
    return target


def _write(path, rgb):
    cv2.imwrite(str(path), cv2.cvtColor(rgb, cv2.COLOR_RGB2BGR))


def test_directory_run_writes_outputs_and_summary(tmp_path, log_dir):
    src = tmp_path / "in"
    src.mkdir()
    _write(src / "a.png", split_image())
    _write(src / "b.png", make_image(8, 8, (128, 128, 128)))
    (src / "notes.txt").write_text("ignored")

    out = tmp_path / "out"
    summary_path = cli.main(["--path", str(src), "--out", str(out), "--level", "1"])

    assert summary_path.parent == log_dir
    summary = json.loads(summary_path.read_text())
    assert sorted(summary["outputs"]) == ["a.png", "b.png"]
    assert summary["params"]["level"] == 1
    assert (out / "a_bin.png").exists()
    assert (out / "b_bin.png").exists()


def test_failing_image_is_logged_and_skipped(tmp_path, log_dir, caplog):
    src = tmp_path / "in"
    src.mkdir()
    _write(src / "good.png", split_image())
    _write(src / "tiny.png", make_image(3, 3, (0, 0, 0)))

    summary_path = cli.main(["--path", str(src), "--out", str(tmp_path / "out")])

    summary = json.loads(summary_path.read_text())
    assert list(summary["outputs"]) == ["good.png"]
    assert "Error processing tiny.png" in caplog.text


def test_single_file_with_options(tmp_path, log_dir):
    src = tmp_path / "page.png"
    _write(src, split_image())

    summary_path = cli.main([
        "--path", str(src),
        "--out", str(tmp_path / "out"),
        "--hypothesis", "average_min_max",
        "--strategy", "queue",
        "--gain", "4",
        "--cutoff", "200",
    ])

    summary = json.loads(summary_path.read_text())
    assert summary["params"]["hypothesis"] == "average_min_max"
    assert summary["params"]["cutoff"] == 200


def test_missing_path_returns_none(tmp_path, log_dir):
    assert cli.main(["--path", str(tmp_path / "nope")]) is None
    assert not log_dir.exists()


def test_unknown_hypothesis_is_rejected_by_parser(tmp_path):
    with pytest.raises(SystemExit):
        cli.main(["--path", str(tmp_path), "--hypothesis", "median"])
