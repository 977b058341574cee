"""Unit tests for the observable-entropy command-line interface."""

import json
from pathlib import Path
from typing import Any

import pytest
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey
from typer.testing import CliRunner

from observable_entropy.bootstrap.entropy import (
    set_content_origin,
    set_entropy_config,
    set_key_value_store,
)
from observable_entropy.cli import app
from observable_entropy.config.entropy_config import (
    DEFAULT_PUBLIC_KEY_HEX,
    EntropyServiceConfig,
)
from observable_entropy.infrastructure.stubs.content_origin_stub import (
    ContentOriginStub,
)
from observable_entropy.infrastructure.stubs.key_value_store_stub import (
    InMemoryKeyValueStore,
)
from tests.helpers.entropy_records import COMMIT_ID

runner = CliRunner()


@pytest.fixture
def record_file(tmp_path: Path, signed_record: dict[str, Any]) -> Path:
    path = tmp_path / "entropy.json"
    path.write_text(json.dumps(signed_record), encoding="utf-8")
    return path


@pytest.fixture
def origin(public_key_hex: str) -> ContentOriginStub:
    """Stub origin installed behind the bootstrap singletons."""
    stub = ContentOriginStub()
    set_entropy_config(
        EntropyServiceConfig(public_key_hex=public_key_hex, environment="development")
    )
    set_key_value_store(InMemoryKeyValueStore())
    set_content_origin(stub)
    return stub


class TestVersionAndPubkey:
    """Tests for --version and pubkey."""

    def test_version(self, project_version: str) -> None:
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert f"observable-entropy version {project_version}" in result.output

    def test_pubkey_default(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("ENTROPY_PUBLIC_KEY", raising=False)

        result = runner.invoke(app, ["pubkey"])

        assert result.exit_code == 0
        assert DEFAULT_PUBLIC_KEY_HEX in result.output


class TestVerify:
    """Tests for offline verification."""

    def test_valid_record(self, record_file: Path, public_key_hex: str) -> None:
        result = runner.invoke(
            app, ["verify", str(record_file), "--public-key", public_key_hex]
        )

        assert result.exit_code == 0
        assert "Verifying 3 files over 5 rounds" in result.output
        assert "VERIFIED" in result.output
        assert "NOT VERIFIED" not in result.output

    def test_json_output(self, record_file: Path, public_key_hex: str) -> None:
        result = runner.invoke(
            app,
            ["verify", str(record_file), "-k", public_key_hex, "--format", "json"],
        )

        assert result.exit_code == 0
        assert '"verified": true' in result.output
        assert '"error": null' in result.output
        assert "Verifying" not in result.output

    def test_wrong_key(self, record_file: Path) -> None:
        other_key = Ed25519PrivateKey.generate().public_key().public_bytes_raw().hex()

        result = runner.invoke(app, ["verify", str(record_file), "-k", other_key])

        assert result.exit_code == 1
        assert "NOT VERIFIED" in result.output

    def test_claimed_hash_mismatch(
        self, record_file: Path, public_key_hex: str
    ) -> None:
        result = runner.invoke(
            app,
            ["verify", str(record_file), "-k", public_key_hex, "--hash", "00" * 32],
        )

        assert result.exit_code == 1

    def test_iteration_budget(self, record_file: Path, public_key_hex: str) -> None:
        result = runner.invoke(
            app,
            [
                "verify",
                str(record_file),
                "-k",
                public_key_hex,
                "--max-iterations",
                "2",
                "-o",
                "json",
            ],
        )

        assert result.exit_code == 1
        assert '"verified": false' in result.output

    def test_unsigned_record(
        self, tmp_path: Path, signed_record: dict[str, Any], public_key_hex: str
    ) -> None:
        del signed_record["signature"]
        path = tmp_path / "unsigned.json"
        path.write_text(json.dumps(signed_record), encoding="utf-8")

        result = runner.invoke(app, ["verify", str(path), "-k", public_key_hex])

        assert result.exit_code == 1
        assert "missing required attribute : signature" in result.output

    def test_missing_file(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["verify", str(tmp_path / "absent.json")])

        assert result.exit_code == 1
        assert "File not found" in result.output

    def test_invalid_json(self, tmp_path: Path) -> None:
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")

        result = runner.invoke(app, ["verify", str(path)])

        assert result.exit_code == 1
        assert "Invalid JSON" in result.output

    def test_invalid_public_key(self, record_file: Path) -> None:
        result = runner.invoke(app, ["verify", str(record_file), "-k", "abcd"])

        assert result.exit_code == 1
        assert "Invalid public key" in result.output


class TestFetch:
    """Tests for fetching through the configured origin."""

    def test_fetch_commit_as_json(
        self, origin: ContentOriginStub, signed_record: dict[str, Any]
    ) -> None:
        origin.publish(COMMIT_ID, signed_record)

        result = runner.invoke(app, ["fetch", "--commit", COMMIT_ID, "-o", "json"])

        assert result.exit_code == 0
        assert f'"hash": "{signed_record["hash"]}"' in result.output

    def test_fetch_latest_verified_as_table(
        self, origin: ContentOriginStub, signed_record: dict[str, Any]
    ) -> None:
        origin.publish(COMMIT_ID, signed_record, latest=True)

        result = runner.invoke(app, ["fetch", "--verify"])

        assert result.exit_code == 0
        assert "VERIFIED" in result.output
        assert "Entropy record" in result.output
        assert "hashIterations" in result.output

    def test_fetch_not_found(self, origin: ContentOriginStub) -> None:
        result = runner.invoke(app, ["fetch", "--commit", COMMIT_ID])

        assert result.exit_code == 1
        assert "No entropy found" in result.output

    def test_commit_and_hash_are_exclusive(self, origin: ContentOriginStub) -> None:
        result = runner.invoke(
            app, ["fetch", "--commit", COMMIT_ID, "--hash", "ab" * 32]
        )

        assert result.exit_code != 0
        assert origin.calls == []
