"""
knowledge_base/management/commands/audit_rule_base.py
======================================================
Management command that prints the evidence rule table per modality
and checks the table invariants.

Usage:
    python manage.py audit_rule_base
    python manage.py audit_rule_base --modality "CT without contrast"
"""

from django.core.management.base import BaseCommand, CommandError

from knowledge_base.evidence_rules import RULES, audit_rules, get_rules
from knowledge_base.modalities import MODALITY_CATALOG, radiation_level


class Command(BaseCommand):
    help = "Print the evidence rule base per modality and fail on invariant violations."

    def add_arguments(self, parser):
        parser.add_argument(
            "--modality",
            help="Only list the rules for this modality key.",
        )

    def handle(self, *args, **options):
        self.stdout.write(self.style.MIGRATE_HEADING("\n=== Evidence Rule Base ===\n"))

        keys = list(MODALITY_CATALOG)
        if options.get("modality"):
            if options["modality"] not in MODALITY_CATALOG:
                raise CommandError(
                    f"Unknown modality {options['modality']!r}. "
                    f"Known: {', '.join(keys)}"
                )
            keys = [options["modality"]]

        for key in keys:
            modality = MODALITY_CATALOG[key]
            rules = get_rules(key)
            self.stdout.write(
                self.style.MIGRATE_LABEL(
                    f"{key} ({radiation_level(modality.radiation_msv)} radiation, "
                    f"{len(rules)} rules)"
                )
            )
            for rule in rules:
                weight = (
                    "graded" if callable(rule.contribution) else f"{rule.contribution:+.1f}"
                )
                line = f"  [{weight:>6}] {rule.name}"
                if rule.references:
                    line += f" (red flags: {', '.join(sorted(rule.references))})"
                self.stdout.write(line)

        # ------------------------------------------------------------------
        # Invariants
        # ------------------------------------------------------------------
        violations = audit_rules()
        if violations:
            for violation in violations:
                self.stderr.write(f"  [INVALID] {violation}")
            raise CommandError(f"{len(violations)} rule base violation(s) found.")

        self.stdout.write(
            self.style.SUCCESS(
                f"\n✔ Audit complete: {len(RULES)} rules, "
                f"{len(MODALITY_CATALOG)} modalities, no violations.\n"
            )
        )
