"""Tests for studyplan.actions.server_actions (result-dict contract)."""
from pathlib import Path

import pytest

from studyplan.actions import server_actions as actions

USER = "user-1"


@pytest.mark.parametrize("call", [
    lambda root: actions.list_plans(None, data_root=root),
    lambda root: actions.get_plan("", "pf.json", data_root=root),
    lambda root: actions.create_plan(None, "PF", data_root=root),
    lambda root: actions.save_study_record(None, "pf.json", {"id": "r1"}, data_root=root),
    lambda root: actions.update_topic_weight(None, "pf.json", "A", "B", 1, data_root=root),
    lambda root: actions.export_full_backup(None, data_root=root),
    lambda root: actions.clear_all_data(" ", data_root=root),
])
def test_unauthenticated(tmp_path: Path, call) -> None:
    result = call(tmp_path)
    assert result["status"] == "error"
    assert result["error_type"] == "unauthenticated"
    assert list(tmp_path.iterdir()) == []


def test_plan_lifecycle_flow(tmp_path: Path) -> None:
    created = actions.create_plan(USER, "Direito  Penal", observations="obs", data_root=tmp_path)
    assert created == {"status": "success", "file_name": "direito-penal.json"}

    duplicate = actions.create_plan(USER, "Direito Penal", data_root=tmp_path)
    assert duplicate["status"] == "error"
    assert duplicate["error_type"] == "already_exists"

    assert actions.list_plans(USER, data_root=tmp_path)["files"] == ["direito-penal.json"]

    updated = actions.update_plan(USER, "direito-penal.json", {"cargo": "Delegado"}, data_root=tmp_path)
    assert updated["status"] == "success"
    plan = actions.get_plan(USER, "direito-penal.json", data_root=tmp_path)["plan"]
    assert plan["cargo"] == "Delegado"

    assert actions.delete_plan(USER, "direito-penal.json", data_root=tmp_path)["status"] == "success"
    missing = actions.delete_plan(USER, "direito-penal.json", data_root=tmp_path)
    assert missing["status"] == "error"
    assert missing["error_type"] == "not_found"


def test_create_plan_with_empty_name(tmp_path: Path) -> None:
    result = actions.create_plan(USER, "  ", data_root=tmp_path)
    assert result["error_type"] == "invalid_input"


def test_records_flow(tmp_path: Path) -> None:
    actions.create_plan(USER, "PF", data_root=tmp_path)

    first = actions.save_study_record(USER, "pf.json", {"id": "r1", "subject": "Matemática"}, data_root=tmp_path)
    again = actions.save_study_record(USER, "pf.json", {"id": "r1", "subject": "Física"}, data_root=tmp_path)
    assert first["created"] is True
    assert again["created"] is False

    actions.save_review_record(USER, "pf.json", {"id": "rv1", "studyRecordId": "r1"}, data_root=tmp_path)
    actions.save_simulado_record(USER, "pf.json", {"id": "s1", "name": "Simulado 1"}, data_root=tmp_path)
    actions.update_simulado_record(USER, "pf.json", {"id": "s1", "name": "Simulado 1b"}, data_root=tmp_path)

    study = actions.get_study_records(USER, "pf.json", data_root=tmp_path)["records"]
    assert [r["subject"] for r in study] == ["Física"]
    simulados = actions.get_simulado_records(USER, "pf.json", data_root=tmp_path)["records"]
    assert [s["name"] for s in simulados] == ["Simulado 1b"]

    deleted = actions.delete_study_record(USER, "pf.json", "r1", data_root=tmp_path)
    assert deleted == {"status": "success", "deleted": 1, "reviews_deleted": 1}
    assert actions.get_review_records(USER, "pf.json", data_root=tmp_path)["records"] == []

    assert actions.delete_simulado_record(USER, "pf.json", "s1", data_root=tmp_path)["deleted"] == 1
    assert actions.delete_review_record(USER, "pf.json", "rv1", data_root=tmp_path)["deleted"] == 0


def test_record_without_id(tmp_path: Path) -> None:
    result = actions.save_study_record(USER, "pf.json", {"subject": "Matemática"}, data_root=tmp_path)
    assert result["status"] == "error"
    assert result["error_type"] == "invalid_input"


def test_records_of_corrupt_plan(tmp_path: Path) -> None:
    user_dir = tmp_path / USER
    user_dir.mkdir()
    (user_dir / "pf.json").write_text("{", encoding="utf-8")

    result = actions.save_study_record(USER, "pf.json", {"id": "r1"}, data_root=tmp_path)
    assert result["error_type"] == "parse_error"
    assert actions.get_plan(USER, "pf.json", data_root=tmp_path)["error_type"] == "parse_error"


def test_study_cycle_flow(tmp_path: Path) -> None:
    assert actions.get_study_cycle(USER, "pf.json", data_root=tmp_path) == {"status": "success", "cycle": None}

    cycle = {"studyCycle": None, "studyHours": "10", "weeklyQuestionsGoal": "100",
             "currentProgressMinutes": 0, "sessionProgressMap": {}, "reminderNotes": [], "studyDays": []}
    assert actions.save_study_cycle(USER, "pf.json", cycle, data_root=tmp_path)["status"] == "success"
    assert actions.get_study_cycle(USER, "pf.json", data_root=tmp_path)["cycle"] == cycle

    assert actions.delete_study_cycle(USER, "pf.json", data_root=tmp_path)["deleted"] is True
    assert actions.delete_study_cycle(USER, "pf.json", data_root=tmp_path) == {"status": "success", "deleted": False}
    assert actions.save_study_cycle(USER, "", cycle, data_root=tmp_path)["error_type"] == "invalid_input"


def test_update_topic_weight(tmp_path: Path, sample_plan: dict) -> None:
    actions.import_guide(USER, {"name": "PF", "subjects": sample_plan["subjects"]}, data_root=tmp_path)

    ok = actions.update_topic_weight(USER, "pf.json", "Matemática", "Frações", 3, data_root=tmp_path)
    assert ok == {"status": "success"}

    missing = actions.update_topic_weight(USER, "pf.json", "Matemática", "Logaritmos", 3, data_root=tmp_path)
    assert missing["status"] == "error"
    assert missing["error_type"] == "not_found"
    assert "Logaritmos" in missing["message"]


def test_migrate_study_record_ids(tmp_path: Path) -> None:
    user_dir = tmp_path / USER
    user_dir.mkdir()
    (user_dir / "old.json").write_text('{"name": "Old", "subjects": [], "records": [{"subject": "X"}]}', encoding="utf-8")

    assert actions.migrate_study_record_ids(USER, "old.json", data_root=tmp_path)["migrated"] == 1
    assert actions.migrate_study_record_ids(USER, "old.json", data_root=tmp_path)["migrated"] == 0


def test_backup_round_trip(tmp_path: Path, sample_plan: dict) -> None:
    actions.import_guide(USER, {"name": "PF", "subjects": sample_plan["subjects"]}, data_root=tmp_path)
    actions.create_plan(USER, "PRF", data_root=tmp_path)
    exported = actions.export_full_backup(USER, data_root=tmp_path)["backup"]
    assert [p["fileName"] for p in exported["plans"]] == ["pf.json", "prf.json"]

    assert actions.clear_all_data(USER, data_root=tmp_path)["deleted"] == 2
    assert actions.list_plans(USER, data_root=tmp_path)["files"] == []

    assert actions.restore_full_backup(USER, exported, data_root=tmp_path)["restored"] == 2
    assert actions.export_full_backup(USER, data_root=tmp_path)["backup"] == exported


def test_restore_invalid_backup(tmp_path: Path) -> None:
    actions.create_plan(USER, "PRF", data_root=tmp_path)
    result = actions.restore_full_backup(USER, {"planos": []}, data_root=tmp_path)
    assert result["error_type"] == "invalid_input"
    assert actions.list_plans(USER, data_root=tmp_path)["files"] == ["prf.json"]


def test_list_plan_summaries_and_upload(tmp_path: Path) -> None:
    public_dir = tmp_path / "public"
    actions.create_plan(USER, "PRF", data_root=tmp_path)
    upload = actions.upload_image(USER, "PRF", "logo.svg", b"<svg/>", data_root=tmp_path, public_dir=public_dir)
    assert upload["icon_url"].startswith("/plan-icons/prf-")

    actions.update_plan(USER, "prf.json", {"iconUrl": upload["icon_url"]}, data_root=tmp_path)
    plans = actions.list_plan_summaries(USER, data_root=tmp_path)["plans"]
    assert plans == [{
        "fileName": "prf.json",
        "name": "PRF",
        "iconUrl": upload["icon_url"],
        "banca": None,
        "subjectCount": 0,
        "topicCount": 0,
    }]


def test_save_study_cycle_rejects_non_objects(tmp_path: Path) -> None:
    result = actions.save_study_cycle(USER, "pf.json", ["not", "a", "cycle"], data_root=tmp_path)
    assert result["status"] == "error"
    assert result["error_type"] == "invalid_input"
    assert not (tmp_path / USER / "pf.cycle.json").exists()


def test_restore_unserializable_backup(tmp_path: Path) -> None:
    actions.create_plan(USER, "PRF", data_root=tmp_path)
    backup = {"plans": [{"fileName": "a.json", "content": {"d": {1, 2}}}]}

    result = actions.restore_full_backup(USER, backup, data_root=tmp_path)

    assert result["status"] == "error"
    assert result["error_type"] == "invalid_input"
    assert [p.name for p in tmp_path.iterdir()] == [USER]
    assert actions.list_plans(USER, data_root=tmp_path)["files"] == ["prf.json"]
