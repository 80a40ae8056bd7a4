"""Tests for the realty-access command line."""
from __future__ import annotations

import json
import textwrap
from pathlib import Path

import pytest
from click.testing import CliRunner

from realty_access_policy.cli.main import cli

_PROFILES_YAML = textwrap.dedent(
    """\
    profiles:
      A1:
        role: agent
        clientIds:
          C1: true
      C1:
        role: buyer
        agentId: A1
      C9:
        role: seller
        agentId: A2
    """
)

_OFFER = {
    "agentId": "A1",
    "clientId": "C1",
    "propertyId": "P1",
    "type": "buyer",
    "status": "draft",
    "purchasePrice": 299000,
    "earnestMoney": 3000,
    "downPayment": 60000,
    "loanAmount": 239000,
    "offerDate": "2024-01-10",
    "expirationDate": "2024-01-12",
    "closingDate": "2024-02-28",
}


@pytest.fixture()
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture()
def profiles_file(tmp_path: Path) -> str:
    path = tmp_path / "profiles.yaml"
    path.write_text(_PROFILES_YAML, encoding="utf-8")
    return str(path)


@pytest.fixture()
def config_file(tmp_path: Path, profiles_file: str) -> str:
    path = tmp_path / "realty_access.yaml"
    path.write_text(
        textwrap.dedent(
            """\
            version: "1"
            profiles_file: profiles.yaml
            audit:
              enabled: true
              log_path: decisions.jsonl
            """
        ),
        encoding="utf-8",
    )
    return str(path)


# ---------------------------------------------------------------------------
# check
# ---------------------------------------------------------------------------


class TestCheck:
    def test_allowed_exits_zero(self, runner: CliRunner, profiles_file: str) -> None:
        result = runner.invoke(
            cli,
            [
                "check",
                "--collection", "offers",
                "--operation", "read",
                "--principal", "C1",
                "--profiles", profiles_file,
                "--existing", json.dumps(_OFFER),
            ],
        )
        assert result.exit_code == 0
        assert "ALLOWED" in result.output

    def test_denied_exits_one_with_condition(self, runner: CliRunner, profiles_file: str) -> None:
        result = runner.invoke(
            cli,
            [
                "check",
                "-C", "offers",
                "-o", "read",
                "-p", "C9",
                "--profiles", profiles_file,
                "--existing", json.dumps(_OFFER),
            ],
        )
        assert result.exit_code == 1
        assert "DENIED" in result.output
        assert "has_resource_access_existing" in result.output

    def test_unauthenticated_request(self, runner: CliRunner, profiles_file: str) -> None:
        result = runner.invoke(
            cli,
            ["check", "-C", "market_data", "-o", "read", "--profiles", profiles_file, "--existing", "{}"],
        )
        assert result.exit_code == 1
        assert "unauthenticated" in result.output

    def test_unauthenticated_request_needs_no_profiles(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["check", "-C", "market_data", "-o", "read", "--existing", "{}"])
        assert result.exit_code == 1
        assert "DENIED" in result.output
        assert "unauthenticated" in result.output
        assert "Provide --profiles" not in result.output

    def test_validation_failure_lists_violations(self, runner: CliRunner, profiles_file: str) -> None:
        proposed = {**_OFFER, "status": "pending"}
        result = runner.invoke(
            cli,
            [
                "check", "-C", "offers", "-o", "create", "-p", "A1",
                "--profiles", profiles_file,
                "--proposed", json.dumps(proposed),
            ],
        )
        assert result.exit_code == 1
        assert "validation_failed" in result.output
        assert "INVALID_ENUM" in result.output

    def test_users_with_resource_id(self, runner: CliRunner, profiles_file: str) -> None:
        result = runner.invoke(
            cli,
            [
                "check", "-C", "users", "-o", "update", "-p", "C1",
                "--profiles", profiles_file,
                "--existing", '{"role": "buyer"}',
                "--proposed", '{"role": "buyer"}',
                "--resource-id", "C1",
            ],
        )
        assert result.exit_code == 0

    def test_config_supplies_profiles_and_audit(
        self, runner: CliRunner, config_file: str, tmp_path: Path
    ) -> None:
        result = runner.invoke(
            cli,
            ["check", "-C", "audit_logs", "-o", "read", "-p", "A1", "--config", config_file, "--existing", "{}"],
        )
        assert result.exit_code == 0
        lines = (tmp_path / "decisions.jsonl").read_text(encoding="utf-8").splitlines()
        assert json.loads(lines[0])["collection"] == "audit_logs"

    def test_invalid_json(self, runner: CliRunner, profiles_file: str) -> None:
        result = runner.invoke(
            cli,
            ["check", "-C", "offers", "-o", "read", "-p", "C1", "--profiles", profiles_file, "--existing", "{bad"],
        )
        assert result.exit_code == 1

    def test_json_must_be_object(self, runner: CliRunner, profiles_file: str) -> None:
        result = runner.invoke(
            cli,
            ["check", "-C", "offers", "-o", "read", "-p", "C1", "--profiles", profiles_file, "--existing", "[1]"],
        )
        assert result.exit_code == 1

    def test_requires_profiles_source(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["check", "-C", "offers", "-o", "read", "-p", "C1"])
        assert result.exit_code == 1

    def test_bad_operation_rejected_by_click(self, runner: CliRunner, profiles_file: str) -> None:
        result = runner.invoke(
            cli, ["check", "-C", "offers", "-o", "list", "--profiles", profiles_file]
        )
        assert result.exit_code == 2


# ---------------------------------------------------------------------------
# validate
# ---------------------------------------------------------------------------


class TestValidate:
    def test_valid_offer(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["validate", "--kind", "offer", "--data", json.dumps(_OFFER)])
        assert result.exit_code == 0
        assert "VALID" in result.output

    def test_invalid_document(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["validate", "-k", "document", "-d", '{"title": ""}'])
        assert result.exit_code == 1
        assert "INVALID" in result.output
        assert "MISSING_FIELD" in result.output

    def test_strict_flag(self, runner: CliRunner) -> None:
        data = json.dumps({**_OFFER, "earnestMoney": -1})
        assert runner.invoke(cli, ["validate", "-k", "offer", "-d", data]).exit_code == 0
        assert runner.invoke(cli, ["validate", "-k", "offer", "-d", data, "--strict"]).exit_code == 1


# ---------------------------------------------------------------------------
# collections / levels / version
# ---------------------------------------------------------------------------


class TestInformational:
    def test_collections(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["collections"])
        assert result.exit_code == 0
        assert "Collections: 26" in result.output

    def test_levels_json(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["levels", "--json"])
        assert result.exit_code == 0
        levels = json.loads(result.output)
        assert levels["PUBLIC"]["permissions"] == ["read"]

    def test_levels_table(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["levels"])
        assert result.exit_code == 0
        assert "CLIENT" in result.output

    def test_version_command(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["version"])
        assert result.exit_code == 0
        assert "realty-access-policy" in result.output


# ---------------------------------------------------------------------------
# audit show
# ---------------------------------------------------------------------------


class TestAuditShow:
    def test_empty_log(self, runner: CliRunner, tmp_path: Path) -> None:
        config = tmp_path / "realty_access.yaml"
        config.write_text("audit:\n  log_path: none.jsonl\n", encoding="utf-8")
        result = runner.invoke(cli, ["audit", "show", "--config", str(config)])
        assert result.exit_code == 0
        assert "No audit entries found" in result.output

    def test_shows_recorded_decisions(self, runner: CliRunner, config_file: str) -> None:
        runner.invoke(
            cli,
            ["check", "-C", "audit_logs", "-o", "read", "-p", "C1", "--config", config_file, "--existing", "{}"],
        )
        result = runner.invoke(cli, ["audit", "show", "--config", config_file, "--denied-only"])
        assert result.exit_code == 0
        assert "Total audit records: 1" in result.output
