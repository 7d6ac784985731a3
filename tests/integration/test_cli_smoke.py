"""
contract-impact — CLI subprocess smoke contracts

File: tests/integration/test_cli_smoke.py
Last updated: 2026-10-18

Purpose
- Enforce CLI behavior for `python -m contract_impact` diff/notify/validate.
- Verify exit codes, command output signals, and notification files on disk.
- Re-running the same change overwrites the same notification files.
"""

from __future__ import annotations

import json
import os
import subprocess
import sys
from pathlib import Path

import pytest
import yaml

PROJECT_ROOT = Path(__file__).resolve().parents[2]
SRC_PATH = PROJECT_ROOT / "src"

ORDERS_OLD = """\
version: "2.0.0"
domain: orders
endpoints:
  - path: /orders
    method: POST
    request:
      sku: string
    response:
      id: uuid
  - path: /orders/{id}
    method: GET
    response:
      status: string
consumers:
  - domain: billing
    uses: ["POST /orders"]
  - domain: shipping
    uses: ["GET /orders/{id}"]
"""
ORDERS_NEW = ORDERS_OLD.replace("      status: string\n", "      status: integer\n")

DESIGN_OLD = """\
# Design system

--color-primary: #3b82f6;
--space-sm: 4px;

## Button
## Card
"""
DESIGN_NEW = DESIGN_OLD.replace("#3b82f6", "#2563eb").replace("## Card\n", "## Modal\n")


def _run_cli(repo_root: Path, *args: str) -> subprocess.CompletedProcess[str]:
    env = os.environ.copy()
    existing_pythonpath = env.get("PYTHONPATH")
    src_pythonpath = str(SRC_PATH)
    env["PYTHONPATH"] = (
        src_pythonpath if not existing_pythonpath else f"{src_pythonpath}:{existing_pythonpath}"
    )
    for name in list(env):
        if name.startswith("CONTRACT_IMPACT_"):
            del env[name]
    return subprocess.run(
        [sys.executable, "-m", "contract_impact", *args],
        cwd=repo_root,
        text=True,
        capture_output=True,
        check=False,
        env=env,
    )


def _write(path: Path, text: str) -> str:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return str(path)


@pytest.mark.integration
def test_diff_json_over_subprocess(tmp_path: Path) -> None:
    old = _write(tmp_path / "snapshots" / "old.yaml", ORDERS_OLD)
    new = _write(tmp_path / "snapshots" / "new.yaml", ORDERS_NEW)

    completed = _run_cli(
        tmp_path, "diff", old, new, "--path", "contracts/interfaces/orders.yaml", "--json"
    )

    assert completed.returncode == 0, completed.stderr
    payload = json.loads(completed.stdout)
    assert [change["kind"] for change in payload["changes"]] == ["field_type_change"]
    # A breaking change reaches every consumer, not only the one using the endpoint.
    assert payload["impact"]["affected_consumers"][0]["domain"] == "billing"
    assert payload["impact"]["affected_consumers"][0]["reason"].startswith("Breaking")
    assert [item["to"] for item in payload["notifications"]] == ["billing", "shipping"]


@pytest.mark.integration
def test_notify_writes_interface_and_design_notifications(tmp_path: Path) -> None:
    orders_old = _write(tmp_path / "snapshots" / "orders-old.yaml", ORDERS_OLD)
    orders_new = _write(tmp_path / "snapshots" / "orders-new.yaml", ORDERS_NEW)
    design_old = _write(tmp_path / "snapshots" / "design-old.md", DESIGN_OLD)
    design_new = _write(tmp_path / "snapshots" / "design-new.md", DESIGN_NEW)
    stamp = "2026-03-01T10:00:00Z"

    for _ in range(2):
        interface_run = _run_cli(
            tmp_path,
            "notify",
            orders_old,
            orders_new,
            "--path",
            "contracts/interfaces/orders.yaml",
            "--timestamp",
            stamp,
            "--write-dir",
            ".",
        )
        assert interface_run.returncode == 0, interface_run.stderr
        design_run = _run_cli(
            tmp_path,
            "notify",
            design_old,
            design_new,
            "--path",
            "contracts/standards/design-system.md",
            "--timestamp",
            stamp,
            "--write-dir",
            ".",
        )
        assert design_run.returncode == 0, design_run.stderr

    root = tmp_path / "management" / "notifications"
    written = sorted(path.relative_to(root).as_posix() for path in root.rglob("*.yaml"))
    assert written == [
        "broadcast/2026-03-01-design-system-component-change.yaml",
        "broadcast/2026-03-01-design-system-token-change.yaml",
        "to-billing/2026-03-01-orders-breaking-change.yaml",
        "to-shipping/2026-03-01-orders-breaking-change.yaml",
    ]

    component = yaml.safe_load(
        (root / "broadcast" / "2026-03-01-design-system-component-change.yaml").read_text(
            encoding="utf-8"
        )
    )
    assert component["type"] == "design_change"
    assert component["change"]["breaking"] is True
    assert component["roles"] == ["domain-designer", "frontend-developer"]
    assert [detail["field"] for detail in component["change"]["details"]] == ["Card", "Modal"]


@pytest.mark.integration
def test_validate_rejects_incomplete_contract(tmp_path: Path) -> None:
    contract = _write(tmp_path / "new.yaml", "version: 1\ndomain: a\nendpoints:\n  - path: /x\n")

    completed = _run_cli(tmp_path, "validate", contract)

    assert completed.returncode == 1
    assert 'Endpoint [0]: missing "method" field' in completed.stdout


@pytest.mark.integration
def test_bad_config_file_exits_with_config_error(tmp_path: Path) -> None:
    contract = _write(tmp_path / "new.yaml", ORDERS_NEW)
    (tmp_path / "contract_impact.toml").write_text(
        "[observability]\nlog_level = \"LOUD\"\n", encoding="utf-8"
    )

    completed = _run_cli(tmp_path, "validate", contract)

    assert completed.returncode == 2
    assert "log_level" in completed.stderr
