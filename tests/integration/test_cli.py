"""Integration tests for the command-line interface."""

from pathlib import Path

import pytest

from sdrecorder.cli import EXIT_FAILED, EXIT_OK, config_overrides, parse_cli_args, run


@pytest.fixture
def source(make_tree):
    return make_tree(["01 - Fx/01 - Boom.mp3", "01 - Fx/02 - Bang.wav", "notes.txt"])


class TestParseArgs:
    """Tests for argument parsing."""

    def test_positional_and_flags(self, tmp_path):
        args = parse_cli_args([str(tmp_path / "s"), str(tmp_path / "t"), "--prefix", "SFX_", "-v"])

        assert args.source == tmp_path / "s"
        assert args.prefix == "SFX_"
        assert args.level == "verbose"
        assert args.summary is True

    def test_overrides(self, tmp_path):
        args = parse_cli_args(["s", "t", "--no-clear", "--no-color", "-q"])

        assert config_overrides(args) == {
            "target": {"clear": False},
            "logging": {"level": "quiet", "color": False},
        }

    def test_missing_target_is_usage_error(self):
        with pytest.raises(SystemExit) as exc_info:
            parse_cli_args(["only-source"])

        assert exc_info.value.code == 2

    def test_conflicting_verbosity(self):
        with pytest.raises(SystemExit):
            parse_cli_args(["s", "t", "-q", "-d"])


class TestRun:
    """Tests for run()."""

    def test_successful_run(self, source, tmp_path, capsys):
        card = tmp_path / "card"

        code = run([str(source), str(card), "--no-color"])

        out = capsys.readouterr().out
        assert code == EXIT_OK
        assert (card / "0001.MP3").exists()
        assert (card / "0002.WAV").exists()
        assert "#define SND_FX_BOOM\t\t1 /* 01 - Fx/01 - Boom.mp3 */" in out
        assert "Skipping invalid file" in out
        assert out.rstrip().endswith("DONE")

    def test_prefix_flag(self, source, tmp_path):
        card = tmp_path / "card"

        assert run([str(source), str(card), "--prefix", "SFX_", "-q"]) == EXIT_OK

        assert (card / "9999.H").read_text(encoding="utf-8").startswith("#define SFX_FX_BOOM")

    def test_config_file(self, source, tmp_path):
        config = tmp_path / "rec.yaml"
        config.write_text("header:\n  name: sounds.h\n")
        card = tmp_path / "card"

        assert run([str(source), str(card), "--config", str(config), "-q"]) == EXIT_OK

        assert (card / "sounds.h").exists()

    def test_missing_config_file(self, source, tmp_path, capsys):
        code = run([str(source), str(tmp_path / "card"), "--config", str(tmp_path / "nope.yaml")])

        assert code == EXIT_FAILED
        assert "Config file not found" in capsys.readouterr().err

    def test_invalid_source(self, tmp_path, capsys):
        code = run([str(tmp_path / "missing"), str(tmp_path / "card")])

        err = capsys.readouterr().err
        assert code == EXIT_FAILED
        assert "Directory not found" in err
        assert "Suggestion:" in err

    def test_unreadable_folder_is_reported(self, source, tmp_path, monkeypatch, capsys):
        real_iterdir = Path.iterdir

        def iterdir(self):
            if self.name == "01 - Fx":
                raise PermissionError(13, "Permission denied", str(self))
            return real_iterdir(self)

        monkeypatch.setattr(Path, "iterdir", iterdir)

        code = run([str(source), str(tmp_path / "card")])

        assert code == EXIT_FAILED
        assert "Failed to list" in capsys.readouterr().err

    def test_env_overrides(self, source, tmp_path, monkeypatch):
        monkeypatch.setenv("SDRECORDER_IDENTIFIER_PREFIX", "ENV_")
        card = tmp_path / "card"

        assert run([str(source), str(card), "-q"]) == EXIT_OK

        assert "ENV_FX_BANG" in (card / "9999.H").read_text(encoding="utf-8")
