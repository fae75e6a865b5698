"""Unit tests for core.traversal module."""

from pathlib import Path

import pytest

from sdrecorder.core.config import RecorderSettings
from sdrecorder.core.errors import FileError, NotADirectoryError
from sdrecorder.core.traversal import Indexer, sorted_children


@pytest.fixture
def album(make_tree):
    return make_tree(
        [
            "01 - Intro.mp3",
            "02 - Rock/01 - Riff.wav",
            "02 - Rock/02 - Solo.MP3",
            "02 - Rock/notes.txt",
            "03/01 - Bell.mp3",
            "04 - Empty/",
            "05 - Outro.Wav",
        ]
    )


class TestSortedChildren:
    """Tests for sorted_children."""

    def test_case_sensitive_code_point_order(self, make_tree):
        root = make_tree(["b.mp3", "B.mp3", "a.mp3", "_x.mp3", "10.mp3", "9.mp3"])

        names = [p.name for p in sorted_children(root)]

        assert names == ["10.mp3", "9.mp3", "B.mp3", "_x.mp3", "a.mp3", "b.mp3"]


class TestIndexer:
    """Tests for Indexer.traverse."""

    def test_indices_are_gapless(self, album, tmp_path):
        state = Indexer().traverse(album, tmp_path / "card")

        assert [row.index for row in state.table] == [1, 2, 3, 4, 5]
        assert state.next_index == 5

    def test_order_and_identifiers(self, album, tmp_path):
        state = Indexer().traverse(album, tmp_path / "card")

        assert [(row.index, row.identifier) for row in state.table] == [
            (1, "SND_SRC_INTRO"),
            (2, "SND_ROCK_RIFF"),
            (3, "SND_ROCK_SOLO"),
            (4, "SND_DIR2_BELL"),
            (5, "SND_SRC_OUTRO"),
        ]

    def test_target_is_flat(self, album, tmp_path):
        target = tmp_path / "card"

        Indexer().traverse(album, target)

        assert sorted(p.name for p in target.iterdir()) == [
            "0001.MP3",
            "0002.WAV",
            "0003.MP3",
            "0004.MP3",
            "0005.WAV",
        ]
        assert (target / "0003.MP3").read_bytes() == b"02 - Rock/02 - Solo.MP3"

    def test_folder_counter_counts_every_directory(self, album, tmp_path):
        state = Indexer().traverse(album, tmp_path / "card")

        assert state.folder_counter == 3

    def test_empty_directory_consumes_folder_slot(self, make_tree, tmp_path):
        root = make_tree(["01 - Empty/", "02/a.mp3"])

        state = Indexer().traverse(root, tmp_path / "card")

        assert state.table.identifiers() == ["SND_DIR2_A"]

    def test_skips_ineligible_files(self, album, tmp_path, captured_logs):
        state = Indexer().traverse(album, tmp_path / "card")

        assert [p.name for p in state.skipped] == ["notes.txt"]
        assert all(row.original_file_name != "notes.txt" for row in state.table)
        assert any(
            level == "WARNING" and "Skipping invalid file" in line
            for level, line in captured_logs
        )

    def test_reports_define_lines(self, album, tmp_path, captured_logs):
        Indexer().traverse(album, tmp_path / "card")

        infos = [line for level, line in captured_logs if level == "INFO"]
        assert infos[0] == "[info] #define SND_SRC_INTRO\t\t1 /* src/01 - Intro.mp3 */"

    def test_files_and_folders_interleave_by_name(self, make_tree, tmp_path):
        root = make_tree(["a.mp3", "b/x.mp3", "c.mp3"])

        state = Indexer().traverse(root, tmp_path / "card")

        assert [row.original_file_name for row in state.table] == ["a.mp3", "x.mp3", "c.mp3"]

    def test_independent_of_listing_order(self, album, tmp_path, monkeypatch):
        first = Indexer().traverse(album, tmp_path / "card1")

        real_iterdir = Path.iterdir

        def reversed_iterdir(self):
            return iter(reversed(list(real_iterdir(self))))

        monkeypatch.setattr(Path, "iterdir", reversed_iterdir)
        second = Indexer().traverse(album, tmp_path / "card2")

        assert first.table.rows == second.table.rows

    def test_collisions_get_suffixes(self, make_tree, tmp_path):
        root = make_tree(["01 - A/B.mp3", "02 - A/B.wav", "A/01 - B.mp3"])

        state = Indexer().traverse(root, tmp_path / "card")

        assert state.table.identifiers() == ["SND_A_B", "SND_A_B_1", "SND_A_B_2"]

    def test_custom_extensions_and_prefix(self, make_tree, tmp_path):
        root = make_tree(["Fx/boom.ogg", "Fx/bang.mp3"])
        settings = RecorderSettings(extensions=("ogg",), identifier_prefix="SFX_")

        state = Indexer(settings).traverse(root, tmp_path / "card")

        assert state.table.identifiers() == ["SFX_FX_BOOM"]
        assert (tmp_path / "card" / "0001.OGG").exists()

    def test_not_a_directory(self, tmp_path):
        file = tmp_path / "a.mp3"
        file.write_bytes(b"x")

        with pytest.raises(NotADirectoryError):
            Indexer().traverse(file, tmp_path / "card")

        assert not (tmp_path / "card").exists()

    def test_missing_root(self, tmp_path):
        with pytest.raises(NotADirectoryError):
            Indexer().traverse(tmp_path / "nope", tmp_path / "card")

    def test_unreadable_subdirectory_aborts(self, make_tree, tmp_path, monkeypatch):
        root = make_tree(["a.mp3", "locked/b.mp3", "z.mp3"])
        card = tmp_path / "card"
        real_iterdir = Path.iterdir

        def iterdir(self):
            if self.name == "locked":
                raise PermissionError(13, "Permission denied", str(self))
            return real_iterdir(self)

        monkeypatch.setattr(Path, "iterdir", iterdir)

        with pytest.raises(FileError, match="Failed to list"):
            Indexer().traverse(root, card)

        assert (card / "0001.MP3").exists()
        assert not (card / "0002.MP3").exists()
