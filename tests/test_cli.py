from __future__ import annotations

import importlib

import fitz
import pytest

from eximgpdf import cli, config

RED = (255, 0, 0)
GREEN = (0, 255, 0)


def test_extract_images_over_tree(tmp_path, make_pdf) -> None:
    make_pdf(tmp_path / "b" / "f10.pdf", [[RED]])
    make_pdf(tmp_path / "b" / "f2.pdf", [[RED], [GREEN]])
    make_pdf(tmp_path / ".trash" / "old.pdf", [[RED]])
    summary = cli.extract_images([str(tmp_path / "b"), str(tmp_path)])
    assert summary == cli.Summary(files=2, images=3)
    assert sorted(p.name for p in (tmp_path / "b" / "f2").iterdir()) == ["p1_i1.png", "p2_i1.png"]
    assert not (tmp_path / ".trash" / "old").exists()


def test_no_paths_means_cwd(tmp_path, make_pdf, monkeypatch) -> None:
    make_pdf(tmp_path / "here.pdf", [[GREEN]])
    monkeypatch.chdir(tmp_path)
    assert cli.extract_images([]) == cli.Summary(files=1, images=1)
    assert (tmp_path / "here" / "p1_i1.png").is_file()


def test_main_success(tmp_path, make_pdf) -> None:
    make_pdf(tmp_path / "doc.pdf", [[RED]])
    assert cli.main([str(tmp_path), "-l", "debug"]) == 0
    assert (tmp_path / "doc" / "p1_i1.png").is_file()


def test_main_with_progress(tmp_path, make_pdf) -> None:
    make_pdf(tmp_path / "doc.pdf", [[RED]])
    assert cli.main([str(tmp_path), "--progress"]) == 0


def test_main_missing_path_fails_whole_run(tmp_path, make_pdf, caplog) -> None:
    make_pdf(tmp_path / "doc.pdf", [[RED]])
    assert cli.main([str(tmp_path), str(tmp_path / "nope")]) == 1
    assert not (tmp_path / "doc").exists()
    assert any("nope" in r.getMessage() for r in caplog.records)


def test_main_bad_pdf(tmp_path) -> None:
    (tmp_path / "broken.pdf").write_bytes(b"")
    assert cli.main([str(tmp_path)]) == 1


def test_version(capsys) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["--version"])
    assert excinfo.value.code == 0
    assert "eximgpdf 0.1" in capsys.readouterr().out


def test_log_level_from_config(monkeypatch) -> None:
    monkeypatch.setattr(cli.config, "LOG_LEVEL", "WARNING")
    assert cli.parse_args([]).log_level == "WARNING"
    assert cli.parse_args(["-l", "error"]).log_level == "ERROR"


def test_progress_flag_can_be_negated(monkeypatch) -> None:
    monkeypatch.setattr(cli.config, "PROGRESS", True)
    assert cli.parse_args([]).progress is True
    assert cli.parse_args(["--no-progress"]).progress is False
    monkeypatch.setattr(cli.config, "PROGRESS", False)
    assert cli.parse_args(["--progress"]).progress is True


def test_config_reads_environment(monkeypatch) -> None:
    monkeypatch.setenv("EXIMGPDF_LOG_LEVEL", "debug")
    monkeypatch.setenv("EXIMGPDF_PDF_LOG_LEVEL", "error")
    monkeypatch.setenv("EXIMGPDF_PROGRESS", "Yes")
    try:
        importlib.reload(config)
        assert config.LOG_LEVEL == "DEBUG"
        assert config.PDF_LOG_LEVEL == "ERROR"
        assert config.PROGRESS is True
        assert cli.parse_args([]).progress is True

        monkeypatch.setenv("EXIMGPDF_PROGRESS", "off")
        importlib.reload(config)
        assert config.PROGRESS is False
    finally:
        monkeypatch.undo()
        importlib.reload(config)


def test_config_defaults(monkeypatch) -> None:
    for name in ("EXIMGPDF_LOG_LEVEL", "EXIMGPDF_PDF_LOG_LEVEL", "EXIMGPDF_PROGRESS"):
        monkeypatch.delenv(name, raising=False)
    try:
        importlib.reload(config)
        assert (config.LOG_LEVEL, config.PDF_LOG_LEVEL, config.PROGRESS) == ("INFO", "WARNING", False)
    finally:
        monkeypatch.undo()
        importlib.reload(config)


def test_main_damaged_page_exits_cleanly(tmp_path, make_pdf, monkeypatch, caplog) -> None:
    make_pdf(tmp_path / "doc.pdf", [[RED]])

    def broken(self, *args, **kwargs):
        raise RuntimeError("object out of range")

    monkeypatch.setattr(fitz.Page, "get_image_info", broken)
    assert cli.main([str(tmp_path)]) == 1
    assert any("page 1" in r.getMessage() for r in caplog.records)
