from albumnote.core.notify import RecordingNotifier
from albumnote.core.vault import NoteWriter, Vault, WriteOutcome


def _writer(root):
    opened = []
    vault = Vault(root, opener=opened.append)
    notifier = RecordingNotifier()
    return NoteWriter(vault, notifier), notifier, opened


def test_creates_folder_and_note(tmp_path):
    writer, notifier, opened = _writer(tmp_path)

    result = writer.write("Albums/Nevermind.md", "hello")

    assert result.outcome is WriteOutcome.CREATED
    assert (tmp_path / "Albums" / "Nevermind.md").read_text(encoding="utf-8") == "hello"
    assert opened == [tmp_path / "Albums" / "Nevermind.md"]
    assert notifier.messages == ["Created Nevermind.md"]


def test_existing_note_is_never_overwritten(tmp_path):
    target = tmp_path / "Albums" / "Nevermind.md"
    target.parent.mkdir()
    original = b"---\nrating: 5\n---\nmy own notes\r\n"
    target.write_bytes(original)
    writer, notifier, opened = _writer(tmp_path)

    result = writer.write("Albums/Nevermind.md", "replacement")

    assert result.outcome is WriteOutcome.ALREADY_EXISTS
    assert target.read_bytes() == original
    assert opened == [target]
    assert notifier.messages == ["File Nevermind.md already exists!"]


def test_storage_error_is_reported_as_failure(tmp_path):
    # A plain file where the folder should be makes folder creation fail
    (tmp_path / "Albums").write_text("not a folder", encoding="utf-8")
    writer, notifier, opened = _writer(tmp_path)

    result = writer.write("Albums/Nevermind.md", "hello")

    assert result.outcome is WriteOutcome.FAILED
    assert isinstance(result.error, OSError)
    assert opened == []
    assert notifier.messages == ["Error creating album note."]


def test_notes_are_not_opened_when_disabled(tmp_path):
    opened = []
    writer = NoteWriter(Vault(tmp_path, opener=opened.append), RecordingNotifier(), open_notes=False)

    assert writer.write("note.md", "x").outcome is WriteOutcome.CREATED
    assert opened == []


def test_folder_at_note_path_is_a_failure_not_a_collision(tmp_path):
    (tmp_path / "Albums" / "Nevermind.md").mkdir(parents=True)
    writer, notifier, opened = _writer(tmp_path)

    result = writer.write("Albums/Nevermind.md", "hello")

    assert result.outcome is WriteOutcome.FAILED
    assert opened == []
    assert notifier.messages == ["Error creating album note."]
    assert (tmp_path / "Albums" / "Nevermind.md").is_dir()
