"""
Flask CLI command tests.
"""

import pytest


@pytest.fixture
def runner(app):
    return app.test_cli_runner()


class TestPermsCommands:

    def test_list_for_role(self, runner):
        result = runner.invoke(args=["perms", "list", "--role", "technician"])
        assert result.exit_code == 0
        assert "DIAGNOSE_REPAIR" in result.output
        assert "CREATE_SALE" not in result.output

    def test_list_unknown_role(self, runner):
        result = runner.invoke(args=["perms", "list", "--role", "owner"])
        assert "FAIL Role 'OWNER' not found" in result.output

    def test_list_category(self, runner):
        result = runner.invoke(args=["perms", "list", "--category", "documents"])
        assert "PARSE_DOCUMENTS" in result.output
        assert "CONFIGURE_AI" in result.output
        assert "Total: 3 permissions" in result.output

    def test_check(self, runner):
        assert "PASS" in runner.invoke(args=["perms", "check", "admin", "CANCEL_REPAIR"]).output
        assert "DOES NOT HAVE" in runner.invoke(args=["perms", "check", "sales", "DIAGNOSE_REPAIR"]).output
        assert "not found" in runner.invoke(args=["perms", "check", "ghost", "CANCEL_REPAIR"]).output

    def test_transitions(self, runner):
        output = runner.invoke(args=["perms", "transitions"]).output
        assert "DELIVER_REPAIR" in output
        assert "ADMIN, SALES" in output


class TestReportCommands:

    def test_stock(self, runner):
        result = runner.invoke(args=["reports", "stock"])
        assert result.exit_code == 0
        assert "SV-THERMAL" in result.output

    def test_ledger_check_passes_on_seed(self, runner):
        assert "PASS" in runner.invoke(args=["ledger", "check"]).output

    def test_ledger_check_reports_drift(self, runner, store):
        collection, _ = store.customers.patch_by_id("c1", balance=10)
        store.commit(collection)
        output = runner.invoke(args=["ledger", "check"]).output
        assert "WARN Customer c1" in output
        assert "FAIL 1 balance(s)" in output
