"""
Interpreter compatibility quirks.

Historic CHIP-8 interpreters disagree on a handful of instructions. The
defaults (everything off) give the classic semantics; the named profiles
match the behaviour some ROMs were written against.
"""

from dataclasses import dataclass
from typing import Dict


@dataclass(frozen=True)
class Quirks:
    """Compatibility switches (all off = default semantics)"""
    vf_reset: bool = False              # 8XY1/2/3 reset VF to 0
    load_store_increment: bool = False  # FX55/FX65 leave I past the last register
    shift_uses_vy: bool = False         # 8XY6/8XYE shift VY into VX
    clip_sprites: bool = False          # Sprites clip at screen edge instead of wrapping
    jump_uses_vx: bool = False          # BXNN jumps to XNN + VX instead of NNN + V0


PROFILES: Dict[str, Quirks] = {
    'default': Quirks(),
    'chip8': Quirks(vf_reset=True, clip_sprites=True),
    'superchip': Quirks(load_store_increment=True, clip_sprites=True, jump_uses_vx=True),
}


def get_profile(name: str) -> Quirks:
    """Look up a profile by name (case-insensitive)"""
    try:
        return PROFILES[name.lower()]
    except KeyError:
        raise ValueError(f"Unknown quirk profile: {name}") from None


def profile_name(quirks: Quirks) -> str:
    """Name of the profile matching these quirks, or 'custom'"""
    for name, profile in PROFILES.items():
        if profile == quirks:
            return name
    return 'custom'
