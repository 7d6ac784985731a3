"""Module entrypoint for ``python -m contract_impact``."""

from __future__ import annotations

from contract_impact.main import cli_entrypoint

if __name__ == "__main__":
    raise SystemExit(cli_entrypoint())
