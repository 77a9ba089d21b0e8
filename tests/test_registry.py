from __future__ import annotations

from pathlib import Path

from browserscript.automation.registry import ResultRegistry


def test_unfilled_slots_are_not_reported(tmp_path: Path) -> None:
    registry = ResultRegistry()
    registry.text_slot("title")
    registry.artifact_slot("full")

    written, errors = registry.persist(tmp_path / "shots")

    assert registry.texts() == {}
    assert written == {} and errors == []
    assert not (tmp_path / "shots").exists()


def test_same_name_shares_slot_last_write_wins() -> None:
    registry = ResultRegistry()
    first = registry.artifact_slot("shot")
    second = registry.artifact_slot("shot")
    assert first is second

    first.fill(b"one", "shot.png")
    second.fill(b"two", "shot.png")

    assert registry.artifacts()["shot"].data == b"two"


def test_text_and_artifact_namespaces_are_separate() -> None:
    registry = ResultRegistry()
    registry.text_slot("header").fill("Example Domain")
    registry.artifact_slot("header").fill(b"png", "header.png")

    assert registry.texts() == {"header": "Example Domain"}
    assert list(registry.artifacts()) == ["header"]


def test_persist_creates_directory_and_writes_files(tmp_path: Path) -> None:
    registry = ResultRegistry()
    registry.artifact_slot("full").fill(b"\x89PNG-full", "full.png")
    registry.artifact_slot("hdr").fill(b"\xff\xd8-jpeg", "header.jpg")
    out = tmp_path / "nested" / "screenshots"

    written, errors = registry.persist(out)

    assert errors == []
    assert written == {"full": out / "full.png", "hdr": out / "header.jpg"}
    assert (out / "full.png").read_bytes() == b"\x89PNG-full"
    assert (out / "header.jpg").read_bytes() == b"\xff\xd8-jpeg"


def test_one_failed_write_does_not_block_others(tmp_path: Path) -> None:
    registry = ResultRegistry()
    registry.artifact_slot("bad").fill(b"x", "missing-dir/bad.png")
    registry.artifact_slot("good").fill(b"y", "good.png")

    written, errors = registry.persist(tmp_path)

    assert list(written) == ["good"]
    assert (tmp_path / "good.png").read_bytes() == b"y"
    assert len(errors) == 1
    assert errors[0].name == "bad"
    assert "bad" in str(errors[0])


def test_directory_creation_failure_reports_every_artifact(tmp_path: Path) -> None:
    blocker = tmp_path / "file"
    blocker.write_text("not a directory", encoding="utf-8")
    registry = ResultRegistry()
    registry.artifact_slot("a").fill(b"1", "a.png")
    registry.artifact_slot("b").fill(b"2", "b.png")

    written, errors = registry.persist(blocker / "shots")

    assert written == {}
    assert [e.name for e in errors] == ["a", "b"]
