"""
Tests for resolved media descriptors.
"""
import dataclasses

import pytest

from media_api import AttemptOutcome, ImageItem, MediaDescriptor
from media_api.exceptions import MediaExtractionError
from media_api.models import synthetic_id


def test_descriptor_defaults():
    media = MediaDescriptor(
        id="1",
        source_url="https://www.tiktok.com/@user/video/1",
        title="Clip",
        author="",
        primary_media_url="https://cdn.example/1.mp4",
    )
    assert media.author == "Unknown"
    assert media.duration == 0
    assert media.images == ()
    assert media.has_video
    assert not media.is_photo_carousel


def test_descriptor_is_immutable():
    media = MediaDescriptor(id="1", source_url="u", title="t", primary_media_url="https://a/b.mp4")
    with pytest.raises(dataclasses.FrozenInstanceError):
        media.title = "other"


def test_descriptor_requires_media():
    with pytest.raises(MediaExtractionError):
        MediaDescriptor(id="1", source_url="u", title="t")


def test_carousel_requires_images():
    with pytest.raises(MediaExtractionError):
        MediaDescriptor(
            id="1",
            source_url="u",
            title="t",
            primary_media_url="https://a/b.mp4",
            is_photo_carousel=True,
        )


def test_image_only_descriptor():
    images = [ImageItem(id="a", full_url="https://a/1.jpg"), ImageItem(id="b", full_url="https://a/2.jpg")]
    media = MediaDescriptor(id="1", source_url="u", title="t", images=images, is_photo_carousel=True)
    assert isinstance(media.images, tuple)
    assert [image.id for image in media.images] == ["a", "b"]
    assert media.images[0].thumbnail_url == "https://a/1.jpg"
    assert not media.has_video
    assert media.audio_url == ""


def test_audio_url_prefers_music():
    media = MediaDescriptor(
        id="1",
        source_url="u",
        title="t",
        primary_media_url="https://a/v.mp4",
        music_url="https://a/m.mp3",
    )
    assert media.audio_url == "https://a/m.mp3"
    plain = dataclasses.replace(media, music_url=None)
    assert plain.audio_url == "https://a/v.mp4"


def test_synthetic_id_is_stable():
    url = "https://t.co/abc"
    assert synthetic_id(url) == synthetic_id(url)
    assert synthetic_id(url).startswith("media_")
    assert synthetic_id(url) != synthetic_id("https://t.co/abd")
    media = MediaDescriptor(id="", source_url=url, title="t", primary_media_url="https://a/v.mp4")
    assert media.id == synthetic_id(url)


def test_attempt_outcome_str():
    assert str(AttemptOutcome("tikwm", "miss")) == "tikwm: miss"
    assert str(AttemptOutcome("snaptik", "failed", "timeout")) == "snaptik: failed (timeout)"
