# src/doselevel/reconstitution.py
"""
Reconstitution of lyophilized peptides.

  concentration (mg/mL) = peptide (mg) / water (mL)
  draw volume (mL)      = desired dose (mg) / concentration
  syringe units         = draw volume * 100   (U-100 insulin syringe)

Non-positive inputs make the arithmetic meaningless; those calls return None
instead of a number.
"""
import logging
import math
from typing import Optional

from .types import PeptidePreset, ReconstitutionResult

log = logging.getLogger(__name__)

# U-100 insulin syringe graduation: 100 units = 1 mL. Not configurable.
SYRINGE_UNITS_PER_ML = 100.0
MCG_PER_MG = 1000.0


def _positive(x: float) -> bool:
    return math.isfinite(x) and x > 0


def calculate(peptide_mg: float, water_ml: float, desired_dose_mg: float) -> Optional[ReconstitutionResult]:
    """
    Concentration, draw volume and syringe units for one dose.

    peptide_mg      : total peptide in the vial (mg)
    water_ml        : bacteriostatic water added (mL)
    desired_dose_mg : dose to draw (mg)
    """
    if not (_positive(peptide_mg) and _positive(water_ml) and _positive(desired_dose_mg)):
        log.debug("reconstitution undefined for peptide=%s mg, water=%s mL, dose=%s mg",
                  peptide_mg, water_ml, desired_dose_mg)
        return None
    concentration = peptide_mg / water_ml
    volume = desired_dose_mg / concentration
    return ReconstitutionResult(
        concentration_mg_per_ml=concentration,
        draw_volume_ml=volume,
        syringe_units=volume * SYRINGE_UNITS_PER_ML,
    )


def calculate_mcg(peptide_mg: float, water_ml: float, desired_dose_mcg: float) -> Optional[ReconstitutionResult]:
    """Same as calculate, with the dose given in micrograms."""
    return calculate(peptide_mg, water_ml, desired_dose_mcg / MCG_PER_MG)


def doses_per_vial(peptide_mg: float, desired_dose_mg: float) -> int:
    """Whole doses a vial holds; 0 when either amount is not positive."""
    if not (_positive(peptide_mg) and _positive(desired_dose_mg)):
        return 0
    return int(peptide_mg / desired_dose_mg)


def from_preset(preset: PeptidePreset, desired_dose_mcg: Optional[float] = None) -> Optional[ReconstitutionResult]:
    """Calculate with a preset's vial size and water, optionally overriding its typical dose."""
    dose_mcg = preset.typical_dose_mcg if desired_dose_mcg is None else desired_dose_mcg
    return calculate_mcg(preset.vial_mg, preset.water_ml, dose_mcg)
