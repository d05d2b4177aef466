from __future__ import annotations

from types import SimpleNamespace

import pytest

from vsphere_inventory import property_fetch


@pytest.fixture
def fake_filter_spec(monkeypatch):
    # The fake property collector reads the view straight off the spec.
    monkeypatch.setattr(
        property_fetch,
        "_filter_spec",
        lambda view, kind: SimpleNamespace(view=view, pathSet=list(kind.properties)),
    )


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    from vsphere_inventory import config

    for aliases in (
        config.URL_ALIASES,
        config.USER_ALIASES,
        config.PASSWORD_ALIASES,
        config.INSECURE_ALIASES,
        config.TIMEOUT_ALIASES,
    ):
        for key in aliases:
            monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
