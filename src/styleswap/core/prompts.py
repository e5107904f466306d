"""Backdrop preset catalog and prompt resolution.

The preset's ``description`` is the literal instruction sent to the model.
A free-text custom prompt, when present, replaces it entirely.
"""

from .models import Preset

BACKDROP_PRESETS: tuple[Preset, ...] = (
    Preset(
        id="studio-white",
        name="Studio White",
        description="clean white studio backdrop",
        icon="fa-camera",
    ),
    Preset(
        id="marble-luxury",
        name="Marble Luxury",
        description="polished white marble surface with soft gold accents and warm diffused light",
        icon="fa-gem",
    ),
    Preset(
        id="botanical",
        name="Botanical",
        description="lush green leaves and soft morning sunlight in a bright greenhouse",
        icon="fa-leaf",
    ),
    Preset(
        id="wooden-table",
        name="Rustic Wood",
        description="rustic wooden tabletop in a cozy kitchen with natural window light",
        icon="fa-tree",
    ),
    Preset(
        id="beach-sunset",
        name="Beach Sunset",
        description="sandy beach at golden hour with a softly blurred ocean horizon",
        icon="fa-umbrella-beach",
    ),
    Preset(
        id="neon-city",
        name="Neon Night",
        description="moody city street at night with colorful neon reflections on wet pavement",
        icon="fa-city",
    ),
)

DEFAULT_PRESET = BACKDROP_PRESETS[0]


def get_preset(preset_id: str) -> Preset:
    """Look up a preset by id.

    Raises:
        KeyError: If no preset has the given id
    """
    for preset in BACKDROP_PRESETS:
        if preset.id == preset_id:
            return preset
    raise KeyError(f"Unknown backdrop preset: {preset_id}")


def get_preset_by_name(name: str) -> Preset:
    """Look up a preset by its display label (used by the preset radio)."""
    for preset in BACKDROP_PRESETS:
        if preset.name == name:
            return preset
    raise KeyError(f"Unknown backdrop preset: {name}")


def resolve_prompt(custom_text: str | None, preset: Preset | None) -> str:
    """Return the instruction text for a generation.

    Any non-empty custom text wins, including whitespace-only text. Otherwise
    the preset description is used. An empty result is passed on unchanged;
    the generation service decides whether to accept it.
    """
    if custom_text:
        return custom_text
    if preset is None:
        return ""
    return preset.description
