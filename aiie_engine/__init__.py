"""
aiie_engine
===========
ARKA Imaging Intelligence Engine (AIIE): clinical-appropriateness
scoring with additive, auditable factor attributions.
"""
