# src/doselevel/presets.py
from typing import Optional

from .types import Medication, PeptidePreset

# Reference values to pre-fill the calculator; not dosing advice.
PEPTIDE_PRESETS: tuple[PeptidePreset, ...] = (
    PeptidePreset("BPC-157",     vial_mg=5,  water_ml=2,   typical_dose_mcg=250,  half_life_h=4),
    PeptidePreset("Semaglutide", vial_mg=5,  water_ml=2.5, typical_dose_mcg=250,  half_life_h=168),
    PeptidePreset("Tirzepatide", vial_mg=10, water_ml=2,   typical_dose_mcg=2500, half_life_h=120),
    PeptidePreset("TB-500",      vial_mg=5,  water_ml=2,   typical_dose_mcg=2500, half_life_h=8),
    PeptidePreset("PT-141",      vial_mg=10, water_ml=2,   typical_dose_mcg=1750, half_life_h=2),
    PeptidePreset("Ipamorelin",  vial_mg=5,  water_ml=2.5, typical_dose_mcg=200,  half_life_h=2),
    PeptidePreset("CJC-1295",    vial_mg=2,  water_ml=2,   typical_dose_mcg=100,  half_life_h=144),
    PeptidePreset("GHK-Cu",      vial_mg=50, water_ml=5,   typical_dose_mcg=200,  half_life_h=12),
)

SEMAGLUTIDE = Medication(
    name="Semaglutide",
    brand_name="Ozempic",
    half_life_h=168,
    default_dosages_mg=(0.25, 0.5, 1.0, 1.7, 2.4),
)

TIRZEPATIDE = Medication(
    name="Tirzepatide",
    brand_name="Mounjaro",
    half_life_h=120,
    default_dosages_mg=(2.5, 5.0, 7.5, 10.0, 12.5, 15.0),
)


def find_preset(name: str) -> Optional[PeptidePreset]:
    """Case-insensitive lookup by preset name."""
    key = name.strip().lower()
    for p in PEPTIDE_PRESETS:
        if p.name.lower() == key:
            return p
    return None


def format_half_life(hours: float) -> str:
    """'4 hours' below a day, '7 days' otherwise."""
    if hours >= 24:
        return f"{hours / 24:.0f} days"
    return f"{hours:.0f} hours"
