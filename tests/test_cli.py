"""Tests for CLI argument parsing and the list-operations/call/sign modes."""

import argparse
import json
from pathlib import Path

import pytest

from iaas_client import cli
from iaas_client.catalog import REGISTRY
from iaas_client.cli import (
    CallArgs,
    ListOperationsArgs,
    SignArgs,
    main,
    parse_args,
    parse_assignment,
)
from iaas_client.client import IaaSService
from tests.conftest import RecordingTransport, envelope, json_response, request_params


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, package_logger):
    # main() configures the package logger; package_logger undoes that
    for name in ("QY_ACCESS_KEY_ID", "QY_SECRET_ACCESS_KEY", "QY_ZONE"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    path = tmp_path / "config.yaml"
    path.write_text(
        "qy_access_key_id: 'QYACCESSKEYIDEXAMPLE'\n"
        "qy_secret_access_key: 'SECRETACCESSKEY'\n"
        "zone: 'pek3a'\n"
        "retry:\n"
        "  base: 0\n"
        "  max: 0\n",
        encoding="utf-8",
    )
    return path


@pytest.fixture
def fake_api(monkeypatch):
    """Route the CLI's IaaSService through a recording transport."""

    def install(body) -> RecordingTransport:
        transport = RecordingTransport(lambda request: json_response(body))
        monkeypatch.setattr(
            cli, "IaaSService", lambda config: IaaSService(config, transport=transport)
        )
        return transport

    return install


class TestParseAssignment:
    @pytest.mark.parametrize(
        "value, expected",
        [
            ("limit=10", ("limit", 10)),
            ("caches=[rc-1, rc-2]", ("caches", ["rc-1", "rc-2"])),
            ("search_word=prod db", ("search_word", "prod db")),
            ("description=", ("description", "")),
            ("name=null", ("name", "null")),
            ("url=a=b", ("url", "a=b")),
        ],
    )
    def test_valid(self, value, expected):
        assert parse_assignment(value) == expected

    @pytest.mark.parametrize("value", ["limit", "=10"])
    def test_invalid(self, value):
        with pytest.raises(argparse.ArgumentTypeError):
            parse_assignment(value)


class TestParseArgs:
    def test_list_operations(self):
        assert isinstance(parse_args(["list-operations"]), ListOperationsArgs)

    def test_call(self):
        args = parse_args(
            ["call", "DescribeCaches", "--zone", "gd2", "--set", "limit=5", "--log-level", "debug"]
        )
        assert args == CallArgs(
            action="DescribeCaches",
            zone="gd2",
            fields={"limit": 5},
            config=None,
            log_level="debug",
        )

    def test_repeated_key_collects_list(self):
        args = parse_args(
            ["call", "DeleteCaches", "--set", "caches=c-1", "--set", "caches=c-2", "--set", "caches=c-3"]
        )
        assert args.fields == {"caches": ["c-1", "c-2", "c-3"]}

    def test_sign_timestamp(self):
        args = parse_args(["sign", "DescribeZones", "--timestamp", "2017-03-01T08:30:05Z"])
        assert isinstance(args, SignArgs)
        assert args.timestamp.isoformat() == "2017-03-01T08:30:05+00:00"

    @pytest.mark.parametrize(
        "argv",
        [
            [],
            ["call"],
            ["call", "DescribeCaches", "--set", "novalue"],
            ["call", "DescribeCaches", "--log-level", "loud"],
            ["sign", "DescribeZones", "--timestamp", "yesterday"],
        ],
    )
    def test_usage_errors(self, argv):
        with pytest.raises(SystemExit) as exc_info:
            parse_args(argv)
        assert exc_info.value.code == 2


class TestListOperations:
    def test_output(self, capsys):
        assert main(["list-operations"]) == 0
        out = capsys.readouterr().out

        assert "DescribeZones\n  GET zone (global)\n" in out
        assert "CreateServerCertificate\n  POST load_balancer (zone)\n" in out
        assert out.rstrip().endswith(f"Total: {len(REGISTRY)} operations")

    def test_sorted(self, capsys):
        main(["list-operations"])
        names = [line for line in capsys.readouterr().out.splitlines() if line and line[0] != " "]
        assert names[:-1] == sorted(names[:-1])


class TestSign:
    def test_prints_signing_material(self, config_file, capsys):
        code = main(
            [
                "sign",
                "DeleteCaches",
                "--config",
                str(config_file),
                "--set",
                "caches=[c-1]",
                "--timestamp",
                "2017-03-01T08:30:05Z",
            ]
        )
        out = capsys.readouterr().out

        assert code == 0
        assert out.startswith("GET https://api.qingcloud.com:443/iaas\n")
        lines = out.splitlines()
        string_to_sign = lines[lines.index("String to sign:") + 1 : lines.index("String to sign:") + 4]
        assert string_to_sign[:2] == ["GET", "/iaas"]
        assert "caches.1=c-1" in string_to_sign[2]
        signed_query = lines[lines.index("Signed query:") + 1]
        assert signed_query.startswith("action=DeleteCaches&zone=pek3a&caches.1=c-1&")
        assert "time_stamp=2017-03-01T08%3A30%3A05Z" in signed_query
        assert "&signature=" in signed_query

    def test_validation_error(self, config_file, capsys):
        code = main(["sign", "CreateCache", "--config", str(config_file), "--set", "cache_size=1"])
        assert code == 1
        assert "cache_type is required" in capsys.readouterr().err

    def test_unknown_action(self, config_file, capsys):
        assert main(["sign", "RunInstances", "--config", str(config_file)]) == 2
        assert "unknown action 'RunInstances'" in capsys.readouterr().err

    def test_missing_config_file(self, tmp_path, capsys):
        code = main(["sign", "DescribeZones", "--config", str(tmp_path / "nope.yaml")])
        assert code == 1
        assert "Config file not found" in capsys.readouterr().err

    def test_env_credentials(self, tmp_path, monkeypatch, capsys):
        path = tmp_path / "config.yaml"
        path.write_text("zone: 'pek3a'\n", encoding="utf-8")
        monkeypatch.setenv("QY_ACCESS_KEY_ID", "ENVKEY")
        monkeypatch.setenv("QY_SECRET_ACCESS_KEY", "ENVSECRET")

        assert main(["sign", "DescribeZones", "--config", str(path)]) == 0
        assert "access_key_id=ENVKEY" in capsys.readouterr().out


class TestCall:
    def test_prints_output_json(self, config_file, fake_api, capsys):
        transport = fake_api(envelope("DeleteCaches", job_id="j-1"))

        code = main(["call", "DeleteCaches", "--config", str(config_file), "--set", "caches=[c-1]"])

        assert code == 0
        assert json.loads(capsys.readouterr().out) == {
            "action": "DeleteCaches",
            "job_id": "j-1",
            "ret_code": 0,
        }
        assert ("caches.1", "c-1") in request_params(transport.requests[0])

    def test_zone_override(self, config_file, fake_api):
        transport = fake_api(envelope("DescribeJobs"))
        main(["call", "DescribeJobs", "--config", str(config_file), "--zone", "sh1a"])
        assert dict(request_params(transport.requests[0]))["zone"] == "sh1a"

    def test_service_error(self, config_file, fake_api, capsys):
        fake_api(envelope("DeleteCaches", ret_code=1400, message="PermissionDenied"))

        code = main(["call", "DeleteCaches", "--config", str(config_file), "--set", "caches=[c-1]"])

        assert code == 1
        assert "QingCloud API error 1400: PermissionDenied" in capsys.readouterr().err

    def test_unknown_field(self, config_file, fake_api, capsys):
        transport = fake_api(envelope("DescribeCaches"))
        code = main(["call", "DescribeCaches", "--config", str(config_file), "--set", "colour=red"])
        assert code == 1
        assert transport.requests == []
