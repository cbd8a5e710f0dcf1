"""Unit tests for workspace transactions and SIGINT handling (stackwright.transaction)."""

from __future__ import annotations

import signal
from pathlib import Path
from unittest.mock import patch

import pytest

from stackwright.transaction import (
    TransactionContext,
    install_interrupt_handler,
    make_interrupt_handler,
    rollback,
    workspace_transaction,
)

pytestmark = pytest.mark.unit


def _populate(root: Path) -> Path:
    (root / "client").mkdir(parents=True)
    (root / "server").mkdir()
    (root / ".env").write_text("JWT_SECRET=x\n")
    return root


# ---------------------------------------------------------------------------
# rollback
# ---------------------------------------------------------------------------


class TestRollback:
    def test_removes_workspace(self, tmp_path: Path):
        root = _populate(tmp_path / "app")
        assert rollback(root) is True
        assert not root.exists()

    def test_idempotent(self, tmp_path: Path):
        root = _populate(tmp_path / "app")
        assert rollback(root) is True
        assert rollback(root) is True

    def test_no_workspace(self):
        assert rollback(None) is True

    def test_leaves_siblings(self, tmp_path: Path):
        root = _populate(tmp_path / "app")
        sibling = tmp_path / "other"
        sibling.mkdir()
        rollback(root)
        assert sibling.exists()


# ---------------------------------------------------------------------------
# workspace_transaction
# ---------------------------------------------------------------------------


class TestWorkspaceTransaction:
    def test_marks_context_active(self, tmp_path: Path):
        context = TransactionContext()
        root = tmp_path / "app"
        with workspace_transaction(context, root) as ctx:
            assert ctx is context
            assert context.active
            assert context.workspace_path == root

    def test_success_keeps_workspace(self, tmp_path: Path):
        context = TransactionContext()
        root = tmp_path / "app"
        with workspace_transaction(context, root):
            _populate(root)
        assert root.exists()
        assert context.active

    def test_exception_rolls_back_and_propagates(self, tmp_path: Path):
        root = tmp_path / "app"
        with pytest.raises(RuntimeError, match="boom"):
            with workspace_transaction(TransactionContext(), root):
                _populate(root)
                raise RuntimeError("boom")
        assert not root.exists()

    def test_exception_before_workspace_created(self, tmp_path: Path):
        root = tmp_path / "app"
        with pytest.raises(ValueError):
            with workspace_transaction(TransactionContext(), root):
                raise ValueError("early")
        assert not root.exists()

    def test_keyboard_interrupt_rolls_back(self, tmp_path: Path):
        root = tmp_path / "app"
        with pytest.raises(KeyboardInterrupt):
            with workspace_transaction(TransactionContext(), root):
                _populate(root)
                raise KeyboardInterrupt
        assert not root.exists()

    def test_failed_cleanup_still_propagates(self, tmp_path: Path):
        root = tmp_path / "app"
        with patch("stackwright.transaction.remove_tree", return_value=False) as remove, \
                patch("stackwright.transaction.print_warning") as warn:
            with pytest.raises(RuntimeError):
                with workspace_transaction(TransactionContext(), root):
                    _populate(root)
                    raise RuntimeError("boom")
        remove.assert_called_once_with(root)
        assert "Remove it manually" in warn.call_args.args[0]


# ---------------------------------------------------------------------------
# SIGINT handler
# ---------------------------------------------------------------------------


class TestInterruptHandler:
    def test_active_run_is_cleaned_up(self, tmp_path: Path):
        root = _populate(tmp_path / "app")
        context = TransactionContext()
        context.begin(root)
        handler = make_interrupt_handler(context)

        with pytest.raises(SystemExit) as exc_info:
            handler(signal.SIGINT, None)

        assert exc_info.value.code == 1
        assert not root.exists()

    def test_inactive_run_leaves_disk_alone(self, tmp_path: Path):
        root = _populate(tmp_path / "app")
        context = TransactionContext(workspace_path=root)
        handler = make_interrupt_handler(context)

        with pytest.raises(SystemExit) as exc_info:
            handler(signal.SIGINT, None)

        assert exc_info.value.code == 1
        assert root.exists()

    def test_active_but_not_yet_created(self, tmp_path: Path):
        context = TransactionContext()
        context.begin(tmp_path / "app")
        with pytest.raises(SystemExit):
            make_interrupt_handler(context)(signal.SIGINT, None)

    def test_install_registers_sigint(self):
        context = TransactionContext()
        with patch("stackwright.transaction.signal.signal") as register:
            handler = install_interrupt_handler(context)
        register.assert_called_once_with(signal.SIGINT, handler)
