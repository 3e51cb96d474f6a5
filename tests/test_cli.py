"""
End-to-end tests for the CLI pipeline with a fake XIQ client.
"""

import csv
import json
import os

import pytest

from xiq_bssid import cli
from xiq_bssid.errors import ApiError, AuthError
from xiq_bssid.models import CommandResult, Device

from conftest import SHOW_INTERFACE, FakeClient, make_api_device


class FakeXIQ(FakeClient):

    def __init__(self, *args, login_error=None, **kwargs):
        super().__init__(*args, **kwargs)
        self.login_error = login_error
        self.logged_in = False

    def login(self):
        if self.login_error:
            raise self.login_error
        self.logged_in = True
        return "tok"


def on_post(path, body):
    dev_id = body["devices"]["ids"][0]
    if dev_id == 2:
        raise ApiError("Request timed out after 30s")
    return {"device_cli_outputs": {str(dev_id): [{"output": SHOW_INTERFACE}]}}


@pytest.fixture
def inventory():
    return {"data": [
        make_api_device(1, hostname="ap-lobby"),
        make_api_device(2, hostname="ap-dock"),
        make_api_device(3, hostname="ap-off", connected=False),
        make_api_device(4, hostname="sw-core", function="SWITCH"),
    ], "total_pages": 1}


@pytest.fixture
def credentials(monkeypatch):
    monkeypatch.setenv("XIQ_USERNAME", "admin")
    monkeypatch.setenv("XIQ_PASSWORD", "pw")


@pytest.fixture
def use_client(monkeypatch):
    def _install(fake):
        monkeypatch.setattr(cli, "XIQClient", lambda **kwargs: fake)
        return fake
    return _install


def argv(tmp_path, *extra):
    return ["--settings", str(tmp_path / "none.yaml"), "--out", str(tmp_path / "out"), *extra]


class TestRun:

    def test_full_run(self, tmp_path, credentials, use_client, inventory, capsys):
        fake = use_client(FakeXIQ(pages=[inventory], on_post=on_post))

        assert cli.main(argv(tmp_path)) == 0

        out_dir = tmp_path / "out"
        assert fake.logged_in
        # only connected APs are queried
        assert sorted(c["body"]["devices"]["ids"][0] for c in fake.post_calls) == [1, 2]
        assert fake.post_calls[0]["body"]["clis"] == ["show interface"]

        with open(out_dir / "wifi-bssids.csv", encoding="utf-8") as f:
            rows = list(csv.reader(f))
        assert len(rows) == 1 + 4
        assert {r[0] for r in rows[1:]} == {"ap-lobby"}

        grouped = (out_dir / "bssids.txt").read_text(encoding="utf-8")
        assert "--- ap-lobby (ID: 1) ---" in grouped
        assert "ap-dock" not in grouped

        cli_dump = json.loads((out_dir / "full_cli.json").read_text(encoding="utf-8"))
        assert [d["device_id"] for d in cli_dump] == [1, 2]
        assert cli_dump[1]["error"].startswith("Request timed out")

        assert len(json.loads((out_dir / "devices.json").read_text(encoding="utf-8"))) == 4
        assert os.path.exists(out_dir / "xiq-db.db")

        printed = capsys.readouterr().out
        assert "Devices with device_function 'AP': 3" in printed
        assert "ap-lobby (ID: 1): Found 6 interface(s)" in printed
        assert "ap-dock (ID: 2): Request timed out" in printed

    def test_custom_command_and_no_db(self, tmp_path, credentials, use_client, inventory):
        fake = use_client(FakeXIQ(pages=[inventory], on_post=on_post))

        assert cli.main(argv(tmp_path, "--no-db", "show", "interface", "wifi0")) == 0
        assert fake.post_calls[0]["body"]["clis"] == ["show interface wifi0"]
        assert not os.path.exists(tmp_path / "out" / "xiq-db.db")

    def test_all_devices_includes_switches(self, tmp_path, credentials, use_client, inventory):
        fake = use_client(FakeXIQ(pages=[inventory], on_post=on_post))

        assert cli.main(argv(tmp_path, "--no-db", "--all-devices")) == 0
        assert sorted(c["body"]["devices"]["ids"][0] for c in fake.post_calls) == [1, 2, 4]

    def test_no_connected_aps(self, tmp_path, credentials, use_client, capsys):
        fake = use_client(FakeXIQ(pages=[{"data": [make_api_device(3, connected=False)]}], on_post=on_post))

        assert cli.main(argv(tmp_path, "--no-db")) == 0
        assert fake.post_calls == []
        assert "No connected APs found." in capsys.readouterr().out


class TestFailures:

    def test_missing_credentials(self, tmp_path, monkeypatch, capsys):
        monkeypatch.delenv("XIQ_USERNAME", raising=False)
        monkeypatch.delenv("XIQ_PASSWORD", raising=False)

        assert cli.main(argv(tmp_path)) == 1
        assert "XIQ_USERNAME" in capsys.readouterr().err

    def test_login_failure(self, tmp_path, credentials, use_client, capsys):
        fake = use_client(FakeXIQ(login_error=AuthError("Login failed with status 401")))

        assert cli.main(argv(tmp_path)) == 1
        assert fake.get_calls == []
        assert "Login failed" in capsys.readouterr().err

    def test_expired_token_during_dispatch_aborts(self, tmp_path, credentials, use_client, inventory, capsys):
        def rejected(path, body):
            raise AuthError("Access denied with status 401")

        use_client(FakeXIQ(pages=[inventory], on_post=rejected))

        assert cli.main(argv(tmp_path, "--no-db")) == 1
        assert "status 401" in capsys.readouterr().err
        assert not os.path.exists(tmp_path / "out" / "wifi-bssids.csv")
        assert not os.path.exists(tmp_path / "out" / "full_cli.json")

    def test_pagination_failure_aborts(self, tmp_path, credentials, use_client, inventory):
        page = {"data": [make_api_device(i) for i in range(1, 3)]}
        fake = use_client(FakeXIQ(pages=[page, ApiError("boom", status_code=502)], on_post=on_post))

        assert cli.main(argv(tmp_path, "--page-size", "2")) == 1
        assert fake.post_calls == []
        assert not os.path.exists(tmp_path / "out" / "wifi-bssids.csv")


def test_collect_records_keeps_dispatch_order():
    a = Device(id=1, hostname="a", connected=True)
    b = Device(id=2, hostname="b", connected=True)
    records = cli.collect_records([
        CommandResult(device=b, error="timed out"),
        CommandResult(device=a, output=SHOW_INTERFACE),
    ])

    assert list(records) == [b, a]
    assert records[b] == []
    assert len(records[a]) == 6
