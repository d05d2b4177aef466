from __future__ import annotations

import io
import signal
import threading

import pytest
from pyVmomi import vim

from vsphere_inventory import main as main_module
from vsphere_inventory import vmware_client
from vsphere_inventory.errors import (
    EXIT_AUTH,
    EXIT_CANCELLED,
    EXIT_CONFIG,
    EXIT_OK,
    EXIT_RETRIEVAL,
    AuthError,
    OperationCancelled,
)

from tests.fakes import datastore_summary, host_summary, make_content, make_object, vm_summary

pytestmark = pytest.mark.usefixtures("fake_filter_spec")

ARGS = ["--server", "https://vc01.lab/sdk", "--user", "administrator@vsphere.local", "--password", "x"]


@pytest.fixture
def endpoint(monkeypatch):
    state = {"connect_calls": 0, "disconnected": []}
    session = object()
    content = make_content(
        {
            vim.HostSystem: [
                make_object("host-10", host_summary("esx01", 2500, 4, 34359738368, 3000, 8192)),
                make_object("host-11", host_summary("esx00", 2000, 2, 1073741824, 5000, 2048)),
            ],
            vim.Datastore: [
                make_object("datastore-1", datastore_summary("ds01", "VMFS", 1099511627776, 549755813888)),
            ],
            vim.VirtualMachine: [
                make_object("vm-1", vm_summary("web01", "Ubuntu Linux (64-bit)")),
            ],
        }
    )

    def fake_connect(**kwargs):
        state["connect_calls"] += 1
        state["kwargs"] = kwargs
        return session

    monkeypatch.setattr(main_module, "connect", fake_connect)
    monkeypatch.setattr(main_module, "service_root", lambda si: content)
    monkeypatch.setattr(main_module, "disconnect", lambda si: state["disconnected"].append(si))
    state["session"] = session
    state["content"] = content
    return state


def _rows(output: str):
    return [line.split() for line in output.splitlines()]


def test_full_report(endpoint):
    stream = io.StringIO()
    assert main_module.main(ARGS, stream=stream) == EXIT_OK

    output = stream.getvalue()
    headings = [line for line in output.splitlines() if line.startswith("***")]
    assert headings == [
        "*** Host Information ***",
        "*** Datastore Information ***",
        "*** VM Information ***",
    ]

    rows = _rows(output)
    assert ["esx01", "3000", "10000", "7000", "8.00GB", "32.00GB", "24.00GB"] in rows
    assert ["esx00", "5000", "4000", "-1000", "2.00GB", "1.00GB", "-1.00GB"] in rows
    assert ["ds01", "VMFS", "1.00TB", "512.00GB"] in rows
    assert output.index("esx01") < output.index("esx00")
    assert "Ubuntu Linux (64-bit)" in output

    assert endpoint["connect_calls"] == 1
    assert endpoint["disconnected"] == [endpoint["session"]]
    assert all(view.destroy_calls == 1 for view in endpoint["content"].viewManager.views)
    assert len(endpoint["content"].viewManager.views) == 3


def test_missing_url_stops_before_login(endpoint):
    stream = io.StringIO()
    exit_code = main_module.main(["--user", "root", "--password", "x"], stream=stream)

    assert exit_code == EXIT_CONFIG
    assert endpoint["connect_calls"] == 0
    assert stream.getvalue() == ""


def test_auth_failure_prints_no_tables(endpoint, monkeypatch):
    def rejected(**kwargs):
        raise AuthError("Credenciales rechazadas por https://vc01.lab:443/sdk")

    monkeypatch.setattr(main_module, "connect", rejected)
    stream = io.StringIO()

    assert main_module.main(ARGS, stream=stream) == EXIT_AUTH
    assert stream.getvalue() == ""
    assert endpoint["disconnected"] == [None]


def test_retrieval_failure_aborts_remaining_kinds(endpoint):
    content = endpoint["content"]
    collector = content.propertyCollector
    original = collector.RetrievePropertiesEx

    def fail_on_datastores(specs, options):
        if specs[0].view.kind_types == [vim.Datastore]:
            raise vim.fault.NoPermission(msg="Permission denied")
        return original(specs, options)

    collector.RetrievePropertiesEx = fail_on_datastores
    stream = io.StringIO()

    assert main_module.main(ARGS, stream=stream) == EXIT_RETRIEVAL

    output = stream.getvalue()
    assert "*** Host Information ***" in output
    assert "*** Datastore Information ***" not in output
    assert "*** VM Information ***" not in output
    assert [view.destroy_calls for view in content.viewManager.views] == [1, 1]
    assert endpoint["disconnected"] == [endpoint["session"]]


def test_timeout_and_insecure_reach_the_client(endpoint):
    main_module.main(ARGS + ["--insecure", "--timeout", "20"], stream=io.StringIO())
    kwargs = endpoint["kwargs"]
    assert kwargs["insecure"] is True
    assert kwargs["operation"].timeout == 20.0
    assert kwargs["endpoint"].host == "vc01.lab"


def test_mask_user():
    assert main_module._mask_user("administrator@vsphere.local") == "ad***@vsphere.local"
    assert main_module._mask_user("root") == "ro***"
    assert main_module._mask_user("") == ""


def test_sigterm_during_login_exits_as_cancelled(monkeypatch):
    def interrupted_login(**kwargs):
        raise OperationCancelled("Operacion cancelada: SIGTERM")

    monkeypatch.setattr(vmware_client, "SmartConnect", interrupted_login)
    stream = io.StringIO()

    assert main_module.main(ARGS, stream=stream) == EXIT_CANCELLED
    assert stream.getvalue() == ""


def test_previous_sigterm_handler_is_restored(endpoint):
    def sentinel(signum, frame):
        pass

    previous = signal.signal(signal.SIGTERM, sentinel)
    try:
        assert main_module.main(ARGS, stream=io.StringIO()) == EXIT_OK
        assert signal.getsignal(signal.SIGTERM) is sentinel
    finally:
        signal.signal(signal.SIGTERM, previous)


def test_main_runs_outside_the_main_thread(endpoint):
    results = []
    stream = io.StringIO()
    before = signal.getsignal(signal.SIGTERM)

    worker = threading.Thread(target=lambda: results.append(main_module.main(ARGS, stream=stream)))
    worker.start()
    worker.join()

    assert results == [EXIT_OK]
    assert "*** VM Information ***" in stream.getvalue()
    assert signal.getsignal(signal.SIGTERM) is before
