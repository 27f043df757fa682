from datetime import date

from albumnote.core.config import AlbumNoteSettings
from albumnote.core.notes import AlbumNoteCreator
from albumnote.core.notify import RecordingNotifier
from albumnote.core.vault import Vault, WriteOutcome


def _creator(tmp_path, **overrides):
    settings = AlbumNoteSettings(vault_path=tmp_path, **overrides)
    notifier = RecordingNotifier()
    creator = AlbumNoteCreator(settings, Vault(tmp_path), notifier, open_notes=False)
    return creator, notifier


def test_creates_note_from_album(tmp_path, nevermind):
    creator, notifier = _creator(tmp_path, fileNameFormat="{{title}} ({{year}})")

    result = creator.create(nevermind, today=date(2024, 3, 9))

    assert result.outcome is WriteOutcome.CREATED
    assert result.path == "Albums/Nevermind (1991).md"
    body = (tmp_path / "Albums" / "Nevermind (1991).md").read_text(encoding="utf-8")
    assert "cover: big.jpg" in body
    assert 'artist: "[[Nirvana]]"' in body
    assert "year: 1991" in body
    assert notifier.messages == ["Created Nevermind (1991).md"]


def test_empty_file_name_format_falls_back_to_title(tmp_path, nevermind):
    creator, _ = _creator(tmp_path, file_name_format="")
    assert creator.create(nevermind).path == "Albums/Nevermind.md"


def test_custom_folder_and_template(tmp_path, nevermind):
    (tmp_path / "Templates").mkdir()
    (tmp_path / "Templates" / "Album.md").write_text(
        "# {{title}}\n{{tracks}} tracks - {{url}}\n", encoding="utf-8"
    )
    creator, _ = _creator(tmp_path, folder="Music/Albums/", template_file="Templates/Album.md")

    result = creator.create(nevermind)

    assert result.path == "Music/Albums/Nevermind.md"
    assert (tmp_path / "Music" / "Albums" / "Nevermind.md").read_text(encoding="utf-8") == (
        "# Nevermind\n12 tracks - http://x\n"
    )


def test_second_creation_reports_existing_note(tmp_path, nevermind):
    creator, notifier = _creator(tmp_path)
    creator.create(nevermind)
    path = tmp_path / "Albums" / "Nevermind.md"
    path.write_text("edited by hand", encoding="utf-8")

    result = creator.create(nevermind)

    assert result.outcome is WriteOutcome.ALREADY_EXISTS
    assert path.read_text(encoding="utf-8") == "edited by hand"
    assert notifier.messages[-1] == "File Nevermind.md already exists!"


def test_prepare_does_not_touch_the_vault(tmp_path, nevermind):
    creator, _ = _creator(tmp_path)
    note = creator.prepare(nevermind)
    assert note.filename == "Nevermind.md"
    assert not (tmp_path / "Albums").exists()
