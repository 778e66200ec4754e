"""Tests for studyplan.tools.records."""
from pathlib import Path

import pytest

from studyplan.errors import InvalidInputError, PlanParseError
from studyplan.models.plan import StudyRecord
from studyplan.tools import records
from studyplan.tools.plan_store import read_plan_data


def _no_write(*args, **kwargs):
    raise AssertionError("plan should not have been written")


def test_upsert_appends_new_record(user_dir: Path, write_plan, sample_plan: dict) -> None:
    write_plan("pf.json", sample_plan)
    created = records.upsert_study_record(user_dir, "pf.json", {"id": "r3", "subject": "Matemática", "topic": "Geometria"})

    assert created is True
    ids = [r["id"] for r in read_plan_data(user_dir, "pf.json")["records"]]
    assert ids == ["r1", "r2", "r3"]


def test_upsert_replaces_in_place(user_dir: Path, write_plan, sample_plan: dict) -> None:
    write_plan("pf.json", sample_plan)
    created = records.upsert_study_record(
        user_dir, "pf.json", StudyRecord(id="r1", subject="Matemática", topic="Frações", notes="revisado")
    )

    assert created is False
    saved = read_plan_data(user_dir, "pf.json")["records"]
    assert [r["id"] for r in saved] == ["r1", "r2"]
    assert saved[0]["notes"] == "revisado"
    assert saved[1] == sample_plan["records"][1]


def test_upsert_keeps_rest_of_document(user_dir: Path, write_plan, sample_plan: dict) -> None:
    write_plan("pf.json", sample_plan)
    records.upsert_simulado_record(user_dir, "pf.json", {
        "id": "s1",
        "date": "2025-04-01",
        "name": "Simulado 1",
        "style": "CEBRASPE",
        "banca": "CEBRASPE",
        "timeSpent": "03:00",
        "subjects": [{"name": "Matemática", "weight": 1, "totalQuestions": 10, "correct": 7, "incorrect": 3, "color": "#ef4444"}],
        "comments": "",
    })

    data = read_plan_data(user_dir, "pf.json")
    assert data["subjects"] == sample_plan["subjects"]
    assert data["reviewRecords"] == sample_plan["reviewRecords"]
    assert data["simuladoRecords"][0]["subjects"][0]["totalQuestions"] == 10


def test_upsert_into_missing_plan_uses_skeleton(user_dir: Path) -> None:
    records.upsert_review_record(user_dir, "new.json", {"id": "rv1", "studyRecordId": "r1", "status": "pending"})

    data = read_plan_data(user_dir, "new.json")
    assert data["name"] == ""
    assert data["observations"] == ""
    assert data["subjects"] == []
    assert data["reviewRecords"][0]["id"] == "rv1"


def test_upsert_into_corrupt_plan_fails_without_writing(user_dir: Path, write_plan) -> None:
    path = write_plan("pf.json", "{corrupt")
    with pytest.raises(PlanParseError):
        records.upsert_study_record(user_dir, "pf.json", {"id": "r1"})
    assert path.read_text(encoding="utf-8") == "{corrupt"


@pytest.mark.parametrize("record", [{}, {"id": ""}, {"subject": "Matemática"}])
def test_upsert_requires_id(user_dir: Path, record: dict) -> None:
    with pytest.raises(InvalidInputError):
        records.upsert_study_record(user_dir, "pf.json", record)
    assert not (user_dir / "pf.json").exists()


def test_upsert_rejects_invalid_review_status(user_dir: Path) -> None:
    with pytest.raises(InvalidInputError):
        records.upsert_review_record(user_dir, "pf.json", {"id": "rv1", "studyRecordId": "r1", "status": "late"})


def test_list_records(user_dir: Path, write_plan, sample_plan: dict) -> None:
    write_plan("pf.json", sample_plan)
    assert [r.id for r in records.list_study_records(user_dir, "pf.json")] == ["r1", "r2"]
    assert len(records.list_review_records(user_dir, "pf.json")) == 3
    assert records.list_simulado_records(user_dir, "pf.json") == []


def test_list_records_missing_plan(user_dir: Path) -> None:
    assert records.list_study_records(user_dir, "nope.json") == []


def test_delete_study_record_cascades_to_reviews(user_dir: Path, write_plan, sample_plan: dict) -> None:
    write_plan("pf.json", sample_plan)
    stats = records.delete_study_record(user_dir, "pf.json", "r1")

    assert stats == {"records": 1, "review_records": 2}
    data = read_plan_data(user_dir, "pf.json")
    assert [r["id"] for r in data["records"]] == ["r2"]
    assert [r["id"] for r in data["reviewRecords"]] == ["rv3"]


def test_delete_unknown_record_does_not_write(user_dir: Path, write_plan, sample_plan: dict, monkeypatch) -> None:
    write_plan("pf.json", sample_plan)
    monkeypatch.setattr(records, "save_plan", _no_write)

    assert records.delete_study_record(user_dir, "pf.json", "missing") == {"records": 0, "review_records": 0}
    assert records.delete_review_record(user_dir, "pf.json", "missing") == 0
    assert records.delete_simulado_record(user_dir, "pf.json", "missing") == 0


def test_delete_from_missing_plan_is_noop(user_dir: Path) -> None:
    assert records.delete_simulado_record(user_dir, "nope.json", "s1") == 0
    assert not (user_dir / "nope.json").exists()


def test_delete_review_record_leaves_study_records(user_dir: Path, write_plan, sample_plan: dict) -> None:
    write_plan("pf.json", sample_plan)
    assert records.delete_review_record(user_dir, "pf.json", "rv2") == 1

    data = read_plan_data(user_dir, "pf.json")
    assert [r["id"] for r in data["reviewRecords"]] == ["rv1", "rv3"]
    assert len(data["records"]) == 2


def test_delete_requires_record_id(user_dir: Path) -> None:
    with pytest.raises(InvalidInputError):
        records.delete_study_record(user_dir, "pf.json", "")


def test_migrate_assigns_unique_ids(user_dir: Path, write_plan) -> None:
    write_plan("old.json", {
        "name": "Old",
        "observations": "",
        "subjects": [],
        "records": [
            {"subject": "X", "topic": "Y"},
            {"id": "keep", "subject": "X", "topic": "Z"},
            {"subject": "X", "topic": "W"},
        ],
    })

    assert records.migrate_study_record_ids(user_dir, "old.json") == 2

    saved = read_plan_data(user_dir, "old.json")["records"]
    ids = [r["id"] for r in saved]
    assert ids[1] == "keep"
    assert all(ids)
    assert len(set(ids)) == 3
    assert ids[0].endswith("-migrated") and ids[2].endswith("-migrated")
    assert [r["topic"] for r in saved] == ["Y", "Z", "W"]


def test_migrate_twice_is_noop(user_dir: Path, write_plan, monkeypatch) -> None:
    write_plan("old.json", {"name": "Old", "subjects": [], "records": [{"subject": "X", "topic": "Y"}]})
    assert records.migrate_study_record_ids(user_dir, "old.json") == 1

    monkeypatch.setattr(records, "save_plan", _no_write)
    assert records.migrate_study_record_ids(user_dir, "old.json") == 0


def test_migrate_missing_plan(user_dir: Path) -> None:
    assert records.migrate_study_record_ids(user_dir, "nope.json") == 0


def test_generated_id_format() -> None:
    timestamp, suffix, marker = records.generate_migrated_id().split("-")
    assert timestamp.isdigit()
    assert len(suffix) == 7
    assert marker == "migrated"
