"""Tests for main module."""

import logging

from jump_mcp.config import Config
from jump_mcp.main import create_server


def test_create_server(tmp_path, monkeypatch, caplog):
    """Test create_server initializes all components."""
    vault_root = tmp_path / "vault"
    (vault_root / "notes").mkdir(parents=True)
    (vault_root / "notes" / "alpha.md").write_text("# Alpha\n\nSee [[beta]]\n")
    (vault_root / "notes" / "beta.md").write_text("# Beta\n")

    monkeypatch.setenv("JUMP_ROOT", str(vault_root))
    monkeypatch.delenv("JUMP_RULES", raising=False)

    config = Config.from_env()

    with caplog.at_level(logging.INFO):
        mcp = create_server(config)

    assert mcp is not None
    assert mcp.name == "jumpMCP"

    log_messages = [record.message for record in caplog.records]
    assert any("Vault loaded: 2 documents" in msg for msg in log_messages)
    assert any("Registering resources" in msg for msg in log_messages)
    assert any("Registering tools" in msg for msg in log_messages)
    assert any("Server configured successfully" in msg for msg in log_messages)


def test_create_server_loads_rules(tmp_path, monkeypatch, caplog):
    """Test create_server reads the rules file from the vault."""
    vault_root = tmp_path / "vault"
    (vault_root / ".jump").mkdir(parents=True)
    (vault_root / ".jump" / "rules.yaml").write_text(
        "rules:\n  - id: public\n  - id: private\n"
    )

    monkeypatch.setenv("JUMP_ROOT", str(vault_root))
    monkeypatch.delenv("JUMP_RULES", raising=False)

    with caplog.at_level(logging.INFO):
        create_server(Config.from_env())

    assert any("Loaded 2 rules" in record.message for record in caplog.records)


def test_create_server_without_rules_file(tmp_path, monkeypatch, caplog):
    """Test a missing rules file falls back to the default rule."""
    monkeypatch.setenv("JUMP_ROOT", str(tmp_path))
    monkeypatch.setenv("JUMP_RULES", str(tmp_path / "missing.yaml"))

    with caplog.at_level(logging.INFO):
        create_server(Config.from_env())

    assert any("using default rule" in record.message for record in caplog.records)
