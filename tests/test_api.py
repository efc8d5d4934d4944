"""HTTP tests for the /v1 API using FastAPI's TestClient."""
import pytest
from fastapi.testclient import TestClient
from app.core.config import Settings
from app.main import create_app
from app.store.reference import REQUIRED_TABLES


@pytest.fixture
def client(tmp_path):
    app_settings = Settings(uploads_dir=str(tmp_path / "uploads"), output_dir=str(tmp_path / "output"))
    with TestClient(create_app(app_settings)) as test_client:
        yield test_client


@pytest.fixture
def uploaded(client, reference_db):
    with open(reference_db, "rb") as f:
        resp = client.post("/v1/reference-db", files={"file": ("plexos.db", f, "application/octet-stream")})
    assert resp.status_code == 200, resp.text
    return resp.json()


def _config_payload(**overrides):
    payload = {
        "studyId": "study-42",
        "changesetId": "cs-7",
        "modelInfo": {"name": "Base", "displayName": "Base Case"},
        "dashboardId": "dash-1",
        "objects": [
            {
                "childObjectName": "Gen1",
                "childClassName": "Generator",
                "childClassLangId": 7,
                "childClassId": 3,
                "parentClassLangId": 1,
                "parentObjectName": "System",
                "properties": [{"propertyLangId": "102", "type": "0"}],
            }
        ],
        "runConfiguration": {"engineVersion": "", "operatingSystem": "Linux", "cores": 0, "memory": ""},
    }
    payload.update(overrides)
    return payload


class TestHealthAndOptions:
    def test_health_before_upload(self, client):
        resp = client.get("/v1/health")
        assert resp.status_code == 200
        body = resp.json()
        assert body["status"] == "OK"
        assert body["uploadsDir"] is True
        assert body["outputDir"] is True
        assert body["dbSchema"] is None

    def test_health_after_upload(self, client, uploaded):
        schema = client.get("/v1/health").json()["dbSchema"]
        assert schema["storeId"] == uploaded["storeId"]
        assert set(schema["schema"]) == set(REQUIRED_TABLES)

    def test_options(self, client):
        body = client.get("/v1/options").json()
        assert body["engineVersions"][0] == "11.0 R02"
        assert body["operatingSystems"] == ["Linux", "Windows"]
        assert 16 in body["cores"]
        assert "128GB" in body["memory"]
        assert [s["name"] for s in body["steps"]] == ["Basic Info", "Database", "Objects", "Run Config", "Generate"]


class TestReferenceDb:
    def test_upload(self, uploaded):
        assert uploaded["message"] == "Reference DB uploaded successfully"
        assert uploaded["dbPath"].endswith("references.db")
        assert set(uploaded["schema"]) == set(REQUIRED_TABLES)

    def test_upload_wrong_extension(self, client):
        resp = client.post("/v1/reference-db", files={"file": ("data.csv", b"a,b\n1,2\n", "text/csv")})
        assert resp.status_code == 400
        assert resp.json()["error"] == "Only .db files are allowed"

    def test_upload_without_file(self, client):
        resp = client.post("/v1/reference-db")
        assert resp.status_code == 400
        assert resp.json()["error"] == "No file uploaded"

    def test_upload_missing_table(self, client, make_reference_db):
        path = make_reference_db("partial.db", tables=[t for t in REQUIRED_TABLES if t != "t_membership"])
        with open(path, "rb") as f:
            resp = client.post("/v1/reference-db", files={"file": ("partial.db", f)})

        assert resp.status_code == 400
        body = resp.json()
        assert body["error"] == "Database schema not recognized"
        assert body["details"]["missingTables"] == ["t_membership"]
        assert set(body["details"]["availableTables"]) == {"t_class", "t_collection", "t_property", "t_object"}
        assert body["details"]["requiredTables"] == list(REQUIRED_TABLES)

    def test_upload_invalid_file(self, client):
        resp = client.post("/v1/reference-db", files={"file": ("junk.db", b"not sqlite " * 100)})
        assert resp.status_code == 400
        assert resp.json()["error"] == "Invalid database file"

    def test_schema_and_classes(self, client, uploaded):
        schema = client.get("/v1/reference-db/schema").json()
        assert schema["isValid"] is True
        assert schema["missingTables"] == []

        classes = client.get("/v1/reference-db/classes").json()
        assert classes["count"] == 4
        assert [c["name"] for c in classes["objectClasses"]] == ["Fuel", "Generator", "Node", "System"]
        assert classes["objectClasses"][1]["classLangId"] == 7

    def test_delete(self, client, uploaded):
        resp = client.delete("/v1/reference-db")
        assert resp.status_code == 200
        assert resp.json()["message"] == "Uploaded database file deleted successfully"

        resp = client.get("/v1/reference-db/classes")
        assert resp.status_code == 400
        assert "upload database first" in resp.json()["error"]

        # deleting again is fine
        assert client.delete("/v1/reference-db").status_code == 200


class TestLookup:
    def test_lookup_before_upload(self, client):
        resp = client.post("/v1/lookup/class-ids", json={"childObjectName": "Gen1", "childClassName": "Generator"})
        assert resp.status_code == 400
        assert resp.json()["error"] == "Database schema not initialized. Please upload database first."

    def test_class_ids(self, client, uploaded):
        resp = client.post("/v1/lookup/class-ids", json={"childObjectName": "Gen1", "childClassName": "Generator"})
        assert resp.status_code == 200
        assert resp.json() == {
            "childClassLangId": 7,
            "parentClassLangId": 1,
            "childObjectName": "Gen1",
            "parentObjectName": "System",
            "childClassId": 3,
            "childClassName": "Generator",
        }

    def test_class_ids_unknown(self, client, uploaded):
        resp = client.post("/v1/lookup/class-ids", json={"childObjectName": "Gen1", "childClassName": "NoSuchClass"})
        assert resp.status_code == 404
        body = resp.json()
        assert body["error"] == "Child class 'NoSuchClass' not found in t_class table"
        assert body["details"] == {"entity": "child class", "key": "NoSuchClass"}

    def test_class_ids_missing_params(self, client, uploaded):
        resp = client.post("/v1/lookup/class-ids", json={"childClassName": "Generator"})
        assert resp.status_code == 400
        assert resp.json()["details"]["missing"] == ["childObjectName"]

    def test_properties(self, client, uploaded):
        resp = client.post("/v1/lookup/properties", json={"childClassId": 3, "parentClassId": 1})
        assert resp.status_code == 200
        body = resp.json()
        assert body["collectionId"] == 5
        assert body["count"] == 2
        assert [p["name"] for p in body["properties"]] == ["FuelCost", "MaxCapacity"]
        assert body["properties"][0]["propertyLangId"] == 102

    def test_properties_no_collection(self, client, uploaded):
        resp = client.post("/v1/lookup/properties", json={"childClassId": 5})
        assert resp.status_code == 404
        assert resp.json()["error"] == "No collection found for child_class_id=5 and parent_class_id=1"

    def test_properties_missing_class_id(self, client, uploaded):
        resp = client.post("/v1/lookup/properties", json={})
        assert resp.status_code == 400

    def test_properties_bad_type(self, client, uploaded):
        resp = client.post("/v1/lookup/properties", json={"childClassId": "three"})
        assert resp.status_code == 400
        assert "childClassId" in resp.json()["error"]


class TestConfigurations:
    def test_create_requires_store(self, client):
        resp = client.post("/v1/configurations", json=_config_payload())
        assert resp.status_code == 400

    def test_create_list_download_delete(self, client, uploaded):
        resp = client.post("/v1/configurations", json=_config_payload())
        assert resp.status_code == 200, resp.text
        body = resp.json()
        file_name = body["fileName"]
        config = body["configuration"]

        assert file_name.startswith("app-") and file_name.endswith(".json")
        assert config["runConfig"]["engine"]["displayName"] == "10.0 R07"
        assert config["runConfig"]["workerPool"]["cores"] == 2
        assert config["runConfig"]["workerPool"]["memory"] == "16GB"
        assert "childClassId" not in config["inputProperties"][0]

        listed = client.get("/v1/configurations").json()["configurations"]
        assert [c["fileName"] for c in listed] == [file_name]

        download = client.get(f"/v1/configurations/{file_name}")
        assert download.status_code == 200
        assert download.json() == config

        assert client.delete(f"/v1/configurations/{file_name}").status_code == 200
        assert client.get(f"/v1/configurations/{file_name}").status_code == 404

    def test_create_missing_fields(self, client, uploaded):
        payload = _config_payload()
        del payload["studyId"]
        del payload["runConfiguration"]
        resp = client.post("/v1/configurations", json=payload)
        assert resp.status_code == 400
        assert resp.json()["details"]["missing"] == ["studyId", "runConfiguration"]
        assert client.get("/v1/configurations").json()["configurations"] == []

    def test_unresolved_ids_sent_as_blank(self, client, uploaded):
        objects = [{"childObjectName": "X", "childClassName": "Y", "childClassLangId": "", "childClassId": "",
                    "properties": [{"propertyLangId": "", "type": "0"}]}]
        resp = client.post("/v1/configurations", json=_config_payload(objects=objects))
        assert resp.status_code == 200
        assert resp.json()["configuration"]["inputProperties"][0]["childClassLangId"] is None

    def test_null_run_configuration_fields_use_defaults(self, client, uploaded):
        run_configuration = {"engineVersion": None, "operatingSystem": None, "cores": None, "memory": None}
        resp = client.post("/v1/configurations", json=_config_payload(runConfiguration=run_configuration))

        assert resp.status_code == 200, resp.text
        assert resp.json()["configuration"]["runConfig"] == {
            "engine": {"displayName": "10.0 R07", "operatingSystem": "Linux"},
            "workerPool": {"os": "Linux", "cores": 2, "memory": "16GB"},
        }

    def test_download_unknown(self, client):
        resp = client.get("/v1/configurations/app-0.json")
        assert resp.status_code == 404
        assert resp.json()["error"] == "File not found"


class TestWizard:
    def test_full_wizard_flow(self, client, uploaded):
        session = client.post("/v1/wizard/sessions").json()
        sid = session["sessionId"]
        obj_id = session["objects"][0]["id"]

        client.put(f"/v1/wizard/sessions/{sid}/study", json={
            "studyId": "s1", "changesetId": "c1", "modelInfo": {"name": "Base", "displayName": "Base Case"},
            "dashboardId": "d1",
        })
        client.put(f"/v1/wizard/sessions/{sid}/run-profile", json={"cores": 32, "memory": "64GB"})

        update = client.patch(f"/v1/wizard/sessions/{sid}/objects/{obj_id}",
                              json={"childObjectName": "Gen1", "childClassName": "Generator"}).json()
        assert update["resolved"] is True
        assert update["warnings"] == []
        assert update["object"]["childClassLangId"] == 7
        assert [p["name"] for p in update["object"]["candidateProperties"]] == ["FuelCost", "MaxCapacity"]

        prop = client.patch(f"/v1/wizard/sessions/{sid}/objects/{obj_id}/properties/0",
                            json={"propertyLangId": 101, "type": "1"}).json()
        assert prop == {"propertyLangId": "101", "type": "1"}

        resp = client.post(f"/v1/wizard/sessions/{sid}/generate")
        assert resp.status_code == 200, resp.text
        config = resp.json()["configuration"]
        assert config["studyId"] == "s1"
        assert config["modelInfo"] == {"name": "Base", "displayName": "Base Case"}
        assert config["inputProperties"][0]["properties"] == [{"propertyLangId": "101", "type": "1"}]
        assert config["runConfig"]["workerPool"] == {"os": "Linux", "cores": 32, "memory": "64GB"}

    def test_failed_lookup_is_soft(self, client, uploaded):
        session = client.post("/v1/wizard/sessions").json()
        sid, obj_id = session["sessionId"], session["objects"][0]["id"]

        resp = client.patch(f"/v1/wizard/sessions/{sid}/objects/{obj_id}",
                            json={"childObjectName": "Gen1", "childClassName": "NoSuchClass"})
        assert resp.status_code == 200
        body = resp.json()
        assert body["resolved"] is False
        assert body["warnings"] == ["Child class 'NoSuchClass' not found in t_class table"]
        assert body["object"]["childClassName"] == "NoSuchClass"

    def test_delete_middle_object_keeps_menus(self, client, uploaded):
        sid = client.post("/v1/wizard/sessions").json()["sessionId"]
        first = client.get(f"/v1/wizard/sessions/{sid}").json()["objects"][0]["id"]
        middle = client.post(f"/v1/wizard/sessions/{sid}/objects").json()["id"]
        last = client.post(f"/v1/wizard/sessions/{sid}/objects").json()["id"]
        for obj_id, cls in ((first, "Generator"), (middle, "Node"), (last, "Generator")):
            client.patch(f"/v1/wizard/sessions/{sid}/objects/{obj_id}",
                         json={"childObjectName": f"{cls}-{obj_id[:4]}", "childClassName": cls})

        objects = client.delete(f"/v1/wizard/sessions/{sid}/objects/{middle}").json()["objects"]

        assert [o["id"] for o in objects] == [first, last]
        assert [p["name"] for p in objects[1]["candidateProperties"]] == ["FuelCost", "MaxCapacity"]

    def test_reupload_refreshes_sessions_and_delete_clears(self, client, uploaded, reference_db):
        session = client.post("/v1/wizard/sessions").json()
        sid, obj_id = session["sessionId"], session["objects"][0]["id"]
        client.patch(f"/v1/wizard/sessions/{sid}/objects/{obj_id}",
                     json={"childObjectName": "Gen1", "childClassName": "Generator"})

        with open(reference_db, "rb") as f:
            client.post("/v1/reference-db", files={"file": ("again.db", f)})
        obj = client.get(f"/v1/wizard/sessions/{sid}").json()["objects"][0]
        assert obj["childClassLangId"] == 7
        assert len(obj["candidateProperties"]) == 2

        client.delete("/v1/reference-db")
        obj = client.get(f"/v1/wizard/sessions/{sid}").json()["objects"][0]
        assert obj["childClassLangId"] is None
        assert obj["candidateProperties"] == []

    def test_property_and_run_profile_validation(self, client):
        session = client.post("/v1/wizard/sessions").json()
        sid, obj_id = session["sessionId"], session["objects"][0]["id"]

        assert client.patch(f"/v1/wizard/sessions/{sid}/objects/{obj_id}/properties/0",
                            json={"type": "7"}).status_code == 400
        assert client.patch(f"/v1/wizard/sessions/{sid}/objects/{obj_id}/properties/5",
                            json={"type": "1"}).status_code == 404
        assert client.put(f"/v1/wizard/sessions/{sid}/run-profile", json={"cores": 3}).status_code == 400

    def test_generate_missing_study_is_hard_failure(self, client, uploaded):
        sid = client.post("/v1/wizard/sessions").json()["sessionId"]
        resp = client.post(f"/v1/wizard/sessions/{sid}/generate")
        assert resp.status_code == 400
        assert resp.json()["details"]["missing"] == ["studyId", "changesetId", "modelInfo", "dashboardId"]
        assert client.get("/v1/configurations").json()["configurations"] == []

    def test_unknown_session(self, client):
        resp = client.get("/v1/wizard/sessions/nope")
        assert resp.status_code == 404
        assert resp.json()["error"] == "Wizard session not found"

    def test_session_lifecycle(self, client):
        sid = client.post("/v1/wizard/sessions").json()["sessionId"]
        client.post(f"/v1/wizard/sessions/{sid}/objects")
        assert len(client.post(f"/v1/wizard/sessions/{sid}/reset").json()["objects"]) == 1
        assert client.delete(f"/v1/wizard/sessions/{sid}").status_code == 200
        assert client.get(f"/v1/wizard/sessions/{sid}").status_code == 404
