"""Shared fixtures: an isolated user directory and a sample plan."""
import json
from pathlib import Path

import pytest

from studyplan.tools.plan_store import get_user_dir

USER_ID = "user-1"


@pytest.fixture
def data_root(tmp_path: Path) -> Path:
    return tmp_path / "data"


@pytest.fixture
def user_dir(data_root: Path) -> Path:
    return get_user_dir(USER_ID, data_root)


@pytest.fixture
def sample_plan() -> dict:
    return {
        "name": "Polícia Federal",
        "observations": "Agente 2025",
        "cargo": "Agente",
        "edital": "Edital nº 1",
        "subjects": [
            {
                "subject": "Matemática",
                "color": "#ef4444",
                "topics": [
                    {
                        "topic_text": "Aritmética",
                        "is_grouping_topic": True,
                        "sub_topics": [
                            {"topic_text": "Frações", "question_count": 4},
                            {"topic_text": "Porcentagem", "question_count": 2},
                        ],
                    },
                    {"topic_text": "Geometria", "question_count": 1},
                ],
            },
            {"subject": "Português", "color": "#3b82f6", "topics": [{"topic_text": "Crase"}]},
        ],
        "records": [
            {
                "id": "r1",
                "date": "2025-03-01",
                "subject": "Matemática",
                "topic": "Frações",
                "studyTime": 3600000,
                "questions": {"correct": 8, "total": 10},
                "pages": [{"start": 10, "end": 20}],
                "videos": [],
                "notes": "",
                "category": "teoria",
                "teoriaFinalizada": False,
                "countInPlanning": True,
            },
            {
                "id": "r2",
                "date": "2025-03-02",
                "subject": "Português",
                "topic": "Crase",
                "studyTime": 1800000,
                "questions": {"correct": 3, "total": 5},
                "pages": [],
                "videos": [],
                "notes": "",
                "category": "questoes",
                "teoriaFinalizada": True,
                "countInPlanning": True,
            },
        ],
        "reviewRecords": [
            {
                "id": "rv1",
                "studyRecordId": "r1",
                "scheduledDate": "2025-03-02",
                "status": "pending",
                "originalDate": "2025-03-01",
                "subject": "Matemática",
                "topic": "Frações",
                "reviewPeriod": "24h",
            },
            {
                "id": "rv2",
                "studyRecordId": "r1",
                "scheduledDate": "2025-03-08",
                "status": "pending",
                "originalDate": "2025-03-01",
                "subject": "Matemática",
                "topic": "Frações",
                "reviewPeriod": "7d",
            },
            {
                "id": "rv3",
                "studyRecordId": "r2",
                "scheduledDate": "2025-03-03",
                "status": "completed",
                "originalDate": "2025-03-02",
                "subject": "Português",
                "topic": "Crase",
                "reviewPeriod": "24h",
                "completedDate": "2025-03-03",
            },
        ],
    }


@pytest.fixture
def write_plan(user_dir: Path):
    """Write a plan file directly, bypassing the store."""
    def _write(file_name: str, data) -> Path:
        path = user_dir / file_name
        text = data if isinstance(data, str) else json.dumps(data, indent=2, ensure_ascii=False)
        path.write_text(text, encoding="utf-8")
        return path
    return _write
