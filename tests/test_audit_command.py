"""
Tests for the ``audit_rule_base`` management command.
"""

from __future__ import annotations

from io import StringIO

import pytest
from django.core.management import call_command
from django.core.management.base import CommandError


class TestAuditRuleBaseCommand:
    def test_full_audit_passes(self):
        out = StringIO()
        call_command("audit_rule_base", stdout=out)
        output = out.getvalue()
        assert "no violations" in output
        assert "No imaging" in output
        assert "Red Flag Symptoms" in output

    def test_single_modality(self):
        out = StringIO()
        call_command("audit_rule_base", modality="X-ray", stdout=out)
        output = out.getvalue()
        assert "Suspected Fracture" in output
        assert "No Red Flags" not in output

    def test_rules_list_their_red_flags(self):
        out = StringIO()
        call_command("audit_rule_base", modality="CT without contrast", stdout=out)
        lines = out.getvalue().splitlines()
        thunderclap = next(l for l in lines if "Red Flag: Thunderclap Headache" in l)
        assert thunderclap.endswith("(red flags: thunderclap)")
        acute = next(l for l in lines if "Acute Onset" in l)
        assert "red flags" not in acute

    def test_unknown_modality(self):
        with pytest.raises(CommandError, match="Unknown modality"):
            call_command("audit_rule_base", modality="Laser", stdout=StringIO())

    def test_violations_fail_the_command(self, monkeypatch):
        monkeypatch.setattr(
            "knowledge_base.management.commands.audit_rule_base.audit_rules",
            lambda: ["Example: zero contribution"],
        )
        err = StringIO()
        with pytest.raises(CommandError, match="1 rule base violation"):
            call_command("audit_rule_base", stdout=StringIO(), stderr=err)
        assert "zero contribution" in err.getvalue()
