"""Prompt catalogue for profession-based portrait generation."""

from __future__ import annotations

from typing import Dict, List

PROFESSION_PROMPTS: Dict[str, str] = {
    "doctor": "professional doctor in white coat, medical setting, mature face, confident expression",
    "engineer": "engineer wearing safety helmet, technical background, focused expression, professional attire",
    "teacher": "teacher in classroom, holding books, warm smile, professional educator",
    "astronaut": "astronaut in space suit, space background, heroic pose",
    "scientist": "scientist in lab coat, laboratory setting, holding test tube, intelligent look",
    "artist": "artist in studio, holding paintbrush, creative expression, artistic background",
    "pilot": "airline pilot in uniform, cockpit background, confident and professional",
    "firefighter": "firefighter in full gear, fire station background, heroic and strong",
    "chef": "professional chef in kitchen, culinary setting, holding cooking utensils",
    "athlete": "professional athlete in sportswear, stadium background, athletic build",
}

GENERIC_PROMPT = "professional adult, office setting, mature appearance"

STYLE_SUFFIX = "realistic face, high quality, detailed"


def list_professions() -> List[str]:
    """Return the supported profession keys in catalogue order."""

    return list(PROFESSION_PROMPTS)


def resolve_template(profession: str) -> str:
    """Look up the template for a profession, falling back to a generic adult."""

    return PROFESSION_PROMPTS.get(profession.strip().lower(), GENERIC_PROMPT)


def build_prompt(profession: str, target_age: int) -> str:
    """Compose the full generation prompt for a profession and target age."""

    return f"{resolve_template(profession)}, age {target_age}, {STYLE_SUFFIX}"
