import re

import pytest

from recipe_voyage.services.storage import (
    AudioFileStore,
    LocalAudioStore,
    LocalPhotoStore,
    PhotoStore,
    format_duration,
)


@pytest.fixture
def audio_dir(tmp_path):
    return LocalAudioStore(tmp_path / "audio")


@pytest.fixture
def photo_dir(tmp_path):
    return LocalPhotoStore(tmp_path / "photos")


def test_local_stores_satisfy_protocols(audio_dir, photo_dir):
    assert isinstance(audio_dir, AudioFileStore)
    assert isinstance(photo_dir, PhotoStore)


def test_recording_names():
    name = LocalAudioStore.new_recording_name()

    assert re.fullmatch(r"recording_[0-9A-F-]{36}\.m4a", name)
    assert name != LocalAudioStore.new_recording_name()


def test_delete_audio_file(audio_dir):
    name = audio_dir.new_recording_name()
    audio_dir.path_for(name).write_bytes(b"aac")
    assert audio_dir.exists(name)

    assert audio_dir.delete_file(name) is True
    assert not audio_dir.exists(name)


def test_delete_missing_audio_file_is_not_an_error(audio_dir):
    assert audio_dir.delete_file("recording_gone.m4a") is True


@pytest.mark.parametrize("name", ["", "../escape.m4a", "nested/a.m4a"])
def test_unsafe_audio_names(audio_dir, name):
    assert audio_dir.delete_file(name) is False
    with pytest.raises(ValueError):
        audio_dir.path_for(name)


def test_delete_audio_file_reports_os_errors(audio_dir):
    # A directory where a file is expected cannot be unlinked
    (audio_dir.root / "clip.m4a").mkdir()

    assert audio_dir.delete_file("clip.m4a") is False


def test_photo_round_trip(photo_dir):
    ref = photo_dir.store(b"\xff\xd8jpeg")

    assert ref.endswith(".bin")
    assert photo_dir.load(ref) == b"\xff\xd8jpeg"
    assert photo_dir.delete(ref) is True
    assert not (photo_dir.root / ref).exists()


def test_photo_invalid_key(photo_dir):
    assert photo_dir.delete("../etc/passwd") is False
    with pytest.raises(ValueError):
        photo_dir.load("../etc/passwd")


@pytest.mark.parametrize("seconds,expected", [
    (0, "0:00"),
    (5.9, "0:05"),
    (65, "1:05"),
    (600, "10:00"),
    (-3, "0:00"),
])
def test_format_duration(seconds, expected):
    assert format_duration(seconds) == expected
