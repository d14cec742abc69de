"""
Credential sources.
"""

import json

import pytest

from src.errors import AccessError, CredentialError
from src.sheet_writer.config import (
    EnvCredentialSource,
    StaticCredentialSource,
    get_credentials_path,
    load_service_account_file,
    service_account_identity,
)


class TestEnvCredentialSource:
    def test_figma_token(self):
        assert EnvCredentialSource({"FIGMA_TOKEN": " figd_abc \n"}).figma_token() == "figd_abc"

    def test_missing_figma_token(self):
        with pytest.raises(CredentialError, match="FIGMA_TOKEN"):
            EnvCredentialSource({}).figma_token()

    def test_google_credentials_from_env(self):
        info = {"client_email": "bot@p.iam.gserviceaccount.com"}
        source = EnvCredentialSource({"GOOGLE_CREDENTIALS": json.dumps(info)})
        assert source.google_credentials() == info

    def test_google_credentials_invalid_json(self):
        with pytest.raises(CredentialError, match="not valid JSON"):
            EnvCredentialSource({"GOOGLE_CREDENTIALS": "{nope"}).google_credentials()

    def test_google_credentials_must_be_object(self):
        with pytest.raises(CredentialError, match="JSON object"):
            EnvCredentialSource({"GOOGLE_CREDENTIALS": "[1, 2]"}).google_credentials()

    def test_falls_back_to_credentials_file(self, tmp_path, monkeypatch):
        monkeypatch.delenv("GOOGLE_APPLICATION_CREDENTIALS", raising=False)
        (tmp_path / "config").mkdir()
        (tmp_path / "config" / "credentials.json").write_text(json.dumps({"client_email": "file@x"}))
        source = EnvCredentialSource({}, project_root=tmp_path)
        assert source.google_credentials() == {"client_email": "file@x"}

    def test_no_credentials_anywhere(self, tmp_path, monkeypatch):
        monkeypatch.delenv("GOOGLE_APPLICATION_CREDENTIALS", raising=False)
        with pytest.raises(CredentialError, match="credentials.json"):
            EnvCredentialSource({}, project_root=tmp_path).google_credentials()


class TestCredentialsPath:
    def test_env_path_wins(self, tmp_path, monkeypatch):
        creds = tmp_path / "sa.json"
        creds.write_text("{}")
        monkeypatch.setenv("GOOGLE_APPLICATION_CREDENTIALS", str(creds))
        assert get_credentials_path(tmp_path / "elsewhere") == creds

    def test_default_when_missing(self, tmp_path, monkeypatch):
        monkeypatch.delenv("GOOGLE_APPLICATION_CREDENTIALS", raising=False)
        assert get_credentials_path(tmp_path) == tmp_path / "credentials.json"


class TestStaticCredentialSource:
    def test_returns_copy(self):
        source = StaticCredentialSource(token="t", service_account={"client_email": "a@b"})
        info = source.google_credentials()
        info["client_email"] = "changed"
        assert source.google_credentials() == {"client_email": "a@b"}

    def test_empty_raises(self):
        with pytest.raises(CredentialError):
            StaticCredentialSource().figma_token()
        with pytest.raises(CredentialError):
            StaticCredentialSource().google_credentials()


def test_service_account_identity():
    assert service_account_identity({"client_email": "a@b"}) == "a@b"
    assert "unknown" in service_account_identity({})


class TestServiceAccountFile:
    def test_reads_file(self, tmp_path):
        path = tmp_path / "sa.json"
        path.write_text(json.dumps({"client_email": "file@x"}))
        assert load_service_account_file(path) == {"client_email": "file@x"}

    def test_missing_file(self, tmp_path):
        with pytest.raises(CredentialError, match="Credentials not found"):
            load_service_account_file(tmp_path / "nope.json")


class TestAccessCheckCli:
    @pytest.fixture
    def opened(self, monkeypatch):
        from src.sheet_writer import __main__ as cli

        seen = {}

        class RecordingPublisher:
            def __init__(self, info):
                seen["info"] = info

            def verify_access(self, spreadsheet_id):
                raise AccessError("denied", identity=seen["info"]["client_email"])

        monkeypatch.setattr(cli, "SheetPublisher", RecordingPublisher)
        return cli, seen

    def test_credentials_path_beats_environment(self, opened, tmp_path, monkeypatch):
        cli, seen = opened
        path = tmp_path / "credentials.json"
        path.write_text(json.dumps({"client_email": "file@x"}))
        monkeypatch.setenv("GOOGLE_CREDENTIALS", json.dumps({"client_email": "env@x"}))
        monkeypatch.setattr("sys.argv", ["src.sheet_writer", "--credentials", str(path)])
        with pytest.raises(SystemExit):
            cli.main()
        assert seen["info"] == {"client_email": "file@x"}

    def test_environment_used_without_flag(self, opened, monkeypatch):
        cli, seen = opened
        monkeypatch.setenv("GOOGLE_CREDENTIALS", json.dumps({"client_email": "env@x"}))
        monkeypatch.setattr("sys.argv", ["src.sheet_writer"])
        with pytest.raises(SystemExit):
            cli.main()
        assert seen["info"] == {"client_email": "env@x"}
