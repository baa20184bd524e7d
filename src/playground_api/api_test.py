import pytest
from fastapi.testclient import TestClient

from cipher_stepper.ciphers.caesar import CaesarCipher
from cipher_stepper.ciphers.registry import CipherRegistry
from playground_api.api import create_app


@pytest.fixture
def client() -> TestClient:
    return TestClient(create_app())


class TestCiphersEndpoint:
    """Test suite for GET /api/ciphers"""

    def test_list(self, client):
        """Test every registered cipher is described"""
        response = client.get("/api/ciphers")
        assert response.status_code == 200
        ciphers = {c["id"]: c for c in response.json()}
        assert list(ciphers) == ["caesar", "atbash", "vigenere", "enigma"]
        assert ciphers["enigma"]["self_inverse"] is True
        assert ciphers["vigenere"]["family"] == "polyalphabetic"
        assert "rotor" in ciphers["enigma"]["visual_hints"]["preferred_metaphors"]

    def test_custom_registry(self):
        """Test the app only serves the registry it was built with"""
        registry = CipherRegistry()
        registry.register(CaesarCipher())
        client = TestClient(create_app(registry))
        assert [c["id"] for c in client.get("/api/ciphers").json()] == ["caesar"]
        assert client.post("/api/encrypt", json={"cipher": "atbash", "text": "A"}).status_code == 404


class TestRunEndpoints:
    """Test suite for POST /api/encrypt and /api/decrypt"""

    def test_encrypt(self, client):
        """Test encrypting with options"""
        response = client.post("/api/encrypt", json={"cipher": "caesar", "text": "HELLO", "options": {"shift": 3}})
        assert response.status_code == 200
        body = response.json()
        assert body["output"] == "KHOOR"
        assert body["data"] == {"shift": 3}
        assert body["history"] is None

    def test_decrypt(self, client):
        """Test decrypting with a keyword"""
        response = client.post("/api/decrypt", json={"cipher": "vigenere", "text": "LXFOPVEFRNHR", "options": {"keyword": "LEMON"}})
        assert response.json()["output"] == "ATTACKATDAWN"

    def test_trace(self, client):
        """Test the trace includes every state starting from the initial one"""
        response = client.post("/api/encrypt", json={"cipher": "atbash", "text": "ABC", "trace": True})
        history = response.json()["history"]
        assert [step["ciphertext"] for step in history] == ["", "Z", "ZY", "ZYX"]

    def test_options_do_not_leak(self, client):
        """Test one request's options do not change the next request's defaults"""
        client.post("/api/encrypt", json={"cipher": "caesar", "text": "A", "options": {"shift": 7}})
        response = client.post("/api/encrypt", json={"cipher": "caesar", "text": "HELLO"})
        assert response.json()["output"] == "KHOOR"

    def test_unknown_cipher(self, client):
        """Test an unknown cipher is a 404"""
        response = client.post("/api/encrypt", json={"cipher": "rot13", "text": "HELLO"})
        assert response.status_code == 404
        assert response.json()["detail"] == "Unknown cipher: rot13"

    def test_invalid_option_falls_back(self, client):
        """Test invalid options fall back to defaults without strict"""
        response = client.post("/api/encrypt", json={"cipher": "caesar", "text": "HELLO", "options": {"shift": "x"}})
        assert response.status_code == 200
        assert response.json()["output"] == "KHOOR"

    def test_strict_rejects(self, client):
        """Test strict configuration errors are a 422"""
        response = client.post(
            "/api/encrypt",
            json={"cipher": "enigma", "text": "HELLO", "options": {"rotors": ["I", "II", "IV"]}, "strict": True},
        )
        assert response.status_code == 422
        assert "rotors" in response.json()["detail"]

    def test_missing_field(self, client):
        """Test request validation"""
        assert client.post("/api/encrypt", json={"cipher": "caesar"}).status_code == 422


class TestAnalyzeEndpoint:
    """Test suite for POST /api/analyze"""

    def test_analyze(self, client):
        """Test the analysis summary for a Caesar ciphertext"""
        response = client.post("/api/analyze", json={"text": "WKH TXLFN EURZQ IRA MXPSV RYHU WKH ODCB GRJ"})
        assert response.status_code == 200
        body = response.json()
        assert body["total_letters"] == 35
        assert body["caesar_shifts"][0]["shift"] == 3
        assert len(body["counts"]) == 26
        assert len(body["ic_key_lengths"]) == 5

    def test_max_key_length_validated(self, client):
        """Test the key length limit must be positive"""
        assert client.post("/api/analyze", json={"text": "ABC", "max_key_length": 0}).status_code == 422


class TestExportEndpoint:
    """Test suite for POST /api/export"""

    def test_export(self, client):
        """Test the export document for an Enigma run"""
        response = client.post("/api/export", json={"cipher": "enigma", "text": "HELLO", "options": {"positions": [1, 2, 3]}})
        assert response.status_code == 200
        body = response.json()
        assert body["cipher_id"] == "enigma"
        assert body["family"] == "mechanical"
        assert body["config"]["positions"] == [1, 2, 3]
        assert body["step"] == 5
