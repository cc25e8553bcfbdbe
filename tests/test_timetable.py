import io
import os
import time

from sqlalchemy.exc import OperationalError

from app.extensions import db, file_store


def test_publish_keeps_only_complete_entries(client, teacher):
    tid, headers = teacher
    entries = [
        {"day": "Mon", "period": "1", "subject": "Maths"},
        {"day": "Mon", "period": "2", "subject": "Physics"},
        {"day": "Tue", "period": 1, "subject": "Chemistry"},
        {"day": "Tue", "period": "2"},
        {"period": "3", "subject": "Art"},
        {"day": "Wed", "period": "1", "subject": ""},
    ]
    resp = client.post("/api/timetable", json={"entries": entries}, headers=headers)
    assert resp.get_json() == {"ok": True, "count": 3}

    rows = client.get("/api/timetable").get_json()
    assert [(r["day"], r["period"], r["subject"]) for r in rows] == [
        ("Mon", "1", "Maths"), ("Mon", "2", "Physics"), ("Tue", "1", "Chemistry")]
    assert all(r["teacher_id"] == tid for r in rows)


def test_publish_replaces_previous_schedule(client, teacher):
    _, headers = teacher
    client.post("/api/timetable",
                json={"entries": [{"day": "Mon", "period": "1", "subject": "Maths"},
                                  {"day": "Mon", "period": "2", "subject": "Art"}]},
                headers=headers)
    client.post("/api/timetable",
                json={"entries": [{"day": "Fri", "period": "4", "subject": "PE"}]},
                headers=headers)
    rows = client.get("/api/timetable").get_json()
    assert [r["subject"] for r in rows] == ["PE"]


def test_publish_empty_list_clears_table(client, teacher):
    _, headers = teacher
    client.post("/api/timetable",
                json={"entries": [{"day": "Mon", "period": "1", "subject": "Maths"}]},
                headers=headers)
    assert client.post("/api/timetable", json={"entries": []},
                       headers=headers).get_json()["count"] == 0
    assert client.get("/api/timetable").get_json() == []


def test_publish_requires_entry_list(client, teacher, student):
    _, headers = teacher
    resp = client.post("/api/timetable", json={"entries": "Mon"}, headers=headers)
    assert resp.status_code == 400
    assert resp.get_json() == {"error": "Invalid body"}
    _, s_headers = student
    assert client.post("/api/timetable", json={"entries": []},
                       headers=s_headers).status_code == 403


def test_timetable_file_upload_and_latest(app, client, teacher):
    _, headers = teacher
    assert client.get("/api/timetable/file").get_json() == {"file": None}

    first = client.post("/api/timetable/upload",
                        data={"file": (io.BytesIO(b"v1"), "term 1.pdf")},
                        headers=headers, content_type="multipart/form-data").get_json()
    assert first["ok"] is True
    assert first["file"].startswith("/uploads/timetables/")
    assert first["file"].endswith("-term_1.pdf")

    second = client.post("/api/timetable/upload",
                         data={"file": (io.BytesIO(b"v2"), "term2.pdf")},
                         headers=headers, content_type="multipart/form-data").get_json()
    with app.app_context():
        files = file_store()
        now = time.time()
        os.utime(files.path_for("timetable", first["file"].rsplit("/", 1)[1]), (now - 60, now - 60))
        os.utime(files.path_for("timetable", second["file"].rsplit("/", 1)[1]), (now, now))

    assert client.get("/api/timetable/file").get_json() == {"file": second["file"]}
    resp = client.get(second["file"])
    assert resp.data == b"v2"
    resp.close()


def test_upload_requires_file(client, teacher):
    _, headers = teacher
    resp = client.post("/api/timetable/upload", data={}, headers=headers)
    assert resp.status_code == 400
    assert resp.get_json() == {"error": "file required"}


def test_failed_publish_keeps_previous_schedule(client, teacher, monkeypatch):
    _, headers = teacher
    client.post("/api/timetable",
                json={"entries": [{"day": "Mon", "period": "1", "subject": "Maths"}]},
                headers=headers)

    def broken_add_all(rows):
        raise OperationalError("INSERT INTO timetable", {}, Exception("disk I/O error"))

    monkeypatch.setattr(db.session, "add_all", broken_add_all)
    resp = client.post("/api/timetable",
                       json={"entries": [{"day": "Fri", "period": "4", "subject": "PE"}]},
                       headers=headers)
    assert resp.status_code == 500
    assert resp.get_json() == {"error": "disk I/O error"}
    monkeypatch.undo()

    rows = client.get("/api/timetable").get_json()
    assert [r["subject"] for r in rows] == ["Maths"]
