"""Tests for topic data models."""

import pytest

from atm.models import PreviousTopic, RevertDirective, TopicManifest


def test_topic_manifest_from_dict():
    topic = TopicManifest.from_dict(
        {
            "name": "gcc-13",
            "description": "GCC 13 toolchain",
            "date": 1700000000,
            "arch": ["amd64", "arm64"],
            "packages": ["gcc", "gcc-runtime"],
        }
    )
    assert topic.name == "gcc-13"
    assert topic.description == "GCC 13 toolchain"
    assert topic.date == 1700000000
    assert topic.arch == {"amd64", "arm64"}
    assert topic.packages == ["gcc", "gcc-runtime"]
    assert topic.enabled is False
    assert topic.closed is False


def test_topic_manifest_from_dict_ignores_upstream_flags():
    topic = TopicManifest.from_dict({"name": "x", "enabled": True, "closed": True})
    assert topic.enabled is False
    assert topic.closed is False
    assert topic.description is None
    assert topic.date == 0
    assert topic.arch == set()
    assert topic.packages == []


def test_topic_manifest_copy_is_independent():
    topic = TopicManifest(name="a", arch={"amd64"}, packages=["p"])
    clone = topic.copy()
    clone.enabled = True
    clone.packages.append("q")
    clone.arch.add("arm64")
    assert topic.enabled is False
    assert topic.packages == ["p"]
    assert topic.arch == {"amd64"}


def test_previous_topic_from_manifest_drops_flags():
    topic = TopicManifest(
        name="kernel", description="Linux 6.9", date=5, arch={"amd64"}, packages=["linux"], enabled=True
    )
    prev = PreviousTopic.from_manifest(topic)
    assert prev.to_dict() == {
        "name": "kernel",
        "description": "Linux 6.9",
        "date": 5,
        "packages": ["linux"],
    }


def test_previous_topic_date_defaults_to_zero():
    prev = PreviousTopic.from_dict({"name": "old", "description": None, "packages": ["foo"]})
    assert prev.date == 0
    assert prev.description is None


def test_previous_topic_from_dict_rejects_mistyped_fields():
    with pytest.raises(TypeError):
        PreviousTopic.from_dict({"name": "old", "packages": "foo"})
    with pytest.raises(TypeError):
        PreviousTopic.from_dict({"name": "old", "date": "yesterday", "packages": ["foo"]})
    with pytest.raises(KeyError):
        PreviousTopic.from_dict({"name": "old"})


def test_previous_topic_to_manifest_is_closed():
    manifest = PreviousTopic(name="old", description="d", date=9, packages=["foo"]).to_manifest()
    assert manifest.closed is True
    assert manifest.enabled is False
    assert manifest.arch == set()
    assert manifest.packages == ["foo"]
    assert manifest.date == 9


def test_revert_directive_str():
    assert str(RevertDirective("gcc-12")) == "gcc-12/stable"
    assert RevertDirective("gcc-12").channel == "stable"
