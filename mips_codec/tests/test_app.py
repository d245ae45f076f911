# mips_codec/tests/test_app.py
import pytest
from mips_codec.app import app


@pytest.fixture
def client():
    app.config["TESTING"] = True
    with app.test_client() as client:
        yield client


def test_ping(client):
    resp = client.get("/api/ping")
    assert resp.status_code == 200
    assert resp.get_json() == {"message": "pong"}

def test_assemble_endpoint(client):
    resp = client.post("/api/assemble", json={"assembly": "add $t0, $t1, $t2\nlw $t0, 4($sp)"})
    assert resp.status_code == 200
    data = resp.get_json()
    assert not data["errors"], f"Expected no errors, got: {data['errors']}"
    assert [item["hex"] for item in data["machine_code"]] == ["0x01494020", "0x8fa80004"]

def test_assemble_endpoint_reports_line_errors(client):
    resp = client.post("/api/assemble", json={"assembly": "addi $t0, $zero, 1\nadd $t0, $t1, $t10"})
    assert resp.status_code == 200
    data = resp.get_json()
    assert [item["hex"] for item in data["machine_code"]] == ["0x20080001"]
    assert data["errors"][0]["line"] == 2
    assert data["errors"][0]["kind"] == "UnknownRegister"
    assert data["errors"][0]["column"] == 15

def test_assemble_endpoint_missing_key(client):
    resp = client.post("/api/assemble", json={"code": "add $t0, $t1, $t2"})
    assert resp.status_code == 400
    assert "Missing 'assembly' key" in resp.get_json()["errors"][0]["message"]

def test_disassemble_endpoint(client):
    resp = client.post("/api/disassemble", json={"machine_code": ["0x8fa80004", "0x08000000"]})
    assert resp.status_code == 200
    data = resp.get_json()
    assert data["assembly_code"] == "lw $t0, 4($sp)\nj unimplemented"
    assert data["errors"][0]["kind"] == "UnsupportedDecode"

def test_disassemble_endpoint_requires_list(client):
    resp = client.post("/api/disassemble", json={"machine_code": "0x8fa80004"})
    assert resp.status_code == 400
