import json

import pytest
from click.testing import CliRunner

from cipher_stepper import cli as cli_module
from cipher_stepper.cli import ENV_PREFIX, cli


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


class TestEncryptCommand:
    """Test suite for the encrypt and decrypt commands"""

    def test_encrypt(self, runner):
        """Test encrypting an argument"""
        result = runner.invoke(cli, ["encrypt", "-c", "caesar", "--shift", "3", "hello"])
        assert result.exit_code == 0, result.output
        assert result.output.strip() == "KHOOR"

    def test_decrypt(self, runner):
        """Test decrypting with a keyword"""
        result = runner.invoke(cli, ["decrypt", "-c", "vigenere", "-k", "lemon", "LXFOPVEFRNHR"])
        assert result.exit_code == 0, result.output
        assert result.output.strip() == "ATTACKATDAWN"

    def test_stdin(self, runner):
        """Test the text is read from stdin when no argument is given"""
        result = runner.invoke(cli, ["encrypt", "-c", "atbash"], input="HELLO\n")
        assert result.output.strip() == "SVOOL"

    def test_input_path(self, runner, tmp_path):
        """Test the text is read from a file"""
        path = tmp_path / "plain.txt"
        path.write_text("HELLO\n")
        result = runner.invoke(cli, ["encrypt", "-i", str(path)])
        assert result.output.strip() == "KHOOR"

    def test_enigma_options(self, runner):
        """Test rotor and position options reach the Enigma"""
        result = runner.invoke(cli, ["encrypt", "-c", "enigma", "--rotors", "III,II,I", "--positions", "AAA", "AAAAA"])
        assert result.exit_code == 0, result.output
        assert result.output.strip() == "BDZGO"

    def test_unknown_cipher(self, runner):
        """Test an unknown cipher is a usage error"""
        result = runner.invoke(cli, ["encrypt", "-c", "rot13", "HELLO"])
        assert result.exit_code == 2
        assert "Unknown cipher: rot13" in result.output

    def test_strict_rejects(self, runner):
        """Test strict mode turns a bad rotor id into a usage error"""
        result = runner.invoke(cli, ["encrypt", "-c", "enigma", "--rotors", "I,II,IV", "--strict", "ABC"])
        assert result.exit_code == 2
        assert "rotors" in result.output

    def test_bad_positions(self, runner):
        """Test malformed positions are rejected by the option parser"""
        result = runner.invoke(cli, ["encrypt", "-c", "enigma", "--positions", "1,x,3", "ABC"])
        assert result.exit_code == 2

    def test_env_var(self, runner):
        """Test options can come from the environment"""
        result = runner.invoke(
            cli, ["encrypt", "HELLO"],
            env={f"{ENV_PREFIX}_ENCRYPT_SHIFT": "1"},
            auto_envvar_prefix=ENV_PREFIX,
        )
        assert result.output.strip() == "IFMMP"

    def test_trace(self, runner):
        """Test the trace table is printed before the result"""
        result = runner.invoke(cli, ["encrypt", "--trace", "HI"])
        assert "History" in result.output
        assert result.output.strip().endswith("KL")

    def test_export(self, runner, tmp_path):
        """Test the final state is written as JSON"""
        path = tmp_path / "state.json"
        result = runner.invoke(cli, ["encrypt", "--export", str(path), "HELLO"])
        assert result.exit_code == 0, result.output
        exported = json.loads(path.read_text())
        assert exported["ciphertext"] == "KHOOR"
        assert exported["config"] == {"shift": 3}


class TestOtherCommands:
    """Test suite for list, analyze, play and remote"""

    def test_list(self, runner):
        """Test every built-in cipher is listed"""
        result = runner.invoke(cli, ["list"])
        assert result.exit_code == 0, result.output
        for cipher_id in ("caesar", "atbash", "vigenere", "enigma"):
            assert cipher_id in result.output

    def test_analyze(self, runner):
        """Test the analysis report"""
        result = runner.invoke(cli, ["analyze", "WKH TXLFN EURZQ IRA MXPSV RYHU WKH ODCB GRJ"])
        assert result.exit_code == 0, result.output
        assert "Likely cipher type" in result.output
        assert "Caesar shifts: 3 " in result.output

    def test_play(self, runner):
        """Test playback runs to the end and prints the result"""
        result = runner.invoke(cli, ["play", "--speed", "10", "--log-lines", "0", "ABC"])
        assert result.exit_code == 0, result.output
        assert result.output.strip().endswith("DEF")

    def test_remote(self, runner, monkeypatch):
        """Test remote sends the options to the API client"""
        sent = {}

        class FakeClient:
            def __init__(self, base_url):
                sent["url"] = base_url

            def run(self, cipher, text, options, mode, strict):
                sent.update(cipher=cipher, text=text, options=options, mode=mode, strict=strict)
                return {"output": "KHOOR"}

        monkeypatch.setattr(cli_module, "PlaygroundClient", FakeClient)
        result = runner.invoke(cli, ["remote", "--url", "http://api.test", "-s", "3", "HELLO"])
        assert result.exit_code == 0, result.output
        assert result.output.strip() == "KHOOR"
        assert sent == {
            "url": "http://api.test",
            "cipher": "caesar",
            "text": "HELLO",
            "options": {"shift": 3},
            "mode": "encrypt",
            "strict": False,
        }
