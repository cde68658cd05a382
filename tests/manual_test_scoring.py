"""
tests/manual_test_scoring.py
============================
Manual smoke-test for the AIIE scoring engine.

Bootstraps Django, then ranks the catalog modalities for a
thunderclap-headache presentation and prints the explanation report.
Run from the project root:

    python tests/manual_test_scoring.py
"""

import os
import sys

# ---------------------------------------------------------------------------
# Django bootstrap
# ---------------------------------------------------------------------------
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, PROJECT_ROOT)
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "arka.settings")

import django  # noqa: E402
django.setup()

# ---------------------------------------------------------------------------
# Imports (must come AFTER django.setup())
# ---------------------------------------------------------------------------
from aiie_engine.domain import ClinicalInput  # noqa: E402
from aiie_engine.services import OptionRanker, RuleBasedScoringStrategy  # noqa: E402
from knowledge_base.modalities import MODALITY_CATALOG  # noqa: E402


def main() -> None:
    print("=" * 60)
    print("  AIIE – Manual Scoring Test")
    print("=" * 60)

    strategy = RuleBasedScoringStrategy()
    ranker = OptionRanker(strategy=strategy)
    print("\n✔ OptionRanker created with RuleBasedScoringStrategy")

    clinical_input = ClinicalInput(
        age=55,
        sex="female",
        chief_complaint="headache",
        duration="acute",
        severity="severe",
        red_flags=["thunderclap"],
    )
    print(f"✔ Clinical input: {clinical_input}")

    print("\n--- Ranking catalog modalities ---")
    try:
        ranked = ranker.rank_options(clinical_input, list(MODALITY_CATALOG))
        for idx, (_, result) in enumerate(ranked, start=1):
            print(
                f"    {idx}. {result.modality:<22} {result.final_score:4.1f}/9 "
                f"{result.category_label}"
            )

        print("\n--- Explanation (top option) ---")
        print(strategy.explain_result(ranked[0][1]))

        print("\n--- Explanation (bottom option) ---")
        print(strategy.explain_result(ranked[-1][1]))

    except Exception as exc:
        print(f"\n✘ Scoring failed: {exc.__class__.__name__}: {exc}")
        if hasattr(exc, "details"):
            print(f"  Details: {exc.details}")

    print("\n" + "=" * 60)
    print("  Test complete")
    print("=" * 60)


if __name__ == "__main__":
    main()
