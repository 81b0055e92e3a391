# Licensed under the PolyForm Noncommercial License 1.0.0
"""Built-in catalog of launch vehicles."""

from typing import List

from .models import RocketModel

ROCKET_MODELS = [
    RocketModel("falcon-9", "Falcon 9", "Orbital Launch System", 70, 3.7, 549000, 22800, 7600, 282, 550000,
                (0.15, 0.15, 0.25), "falcon9", "Two-stage orbital launch system with reusable first stage"),
    RocketModel("starship", "Starship", "Super Heavy-Lift", 122, 9, 1200000, 150000, 33400, 380, 1200000,
                (0.8, 0.85, 0.95), "starship", "Fully reusable super heavy-lift launch system"),
    RocketModel("sls", "SLS Block 1", "Heavy-Lift", 111, 8.4, 2970000, 70000, 34200, 450, 980000,
                (0.9, 0.45, 0.05), "sls", "NASA's Space Launch System for Artemis missions"),
    RocketModel("ariane-6", "Ariane 6", "Medium-Heavy Lift", 80, 5.4, 865000, 10350, 12000, 450, 230000,
                (0.05, 0.4, 0.75), "ariane6", "European heavy-lift launch vehicle"),
    RocketModel("long-march-5", "Long March 5", "Heavy-Lift", 57, 5, 868000, 25000, 12600, 430, 700000,
                (0.8, 0.2, 0.1), "longmarch5", "China's heavy-lift launch vehicle"),
    RocketModel("atlas-v", "Atlas V", "Heavy-Lift", 58.3, 3.81, 334000, 18850, 8160, 450, 190000,
                (0.1, 0.3, 0.7), "atlasv", "United Launch Alliance heavy-lift vehicle"),
    RocketModel("delta-iv-heavy", "Delta IV Heavy", "Heavy-Lift", 71.6, 5, 733000, 28370, 27200, 452, 410000,
                (0.15, 0.55, 0.15), "delta4", "ULA's triple-core heavy-lift launcher"),
    RocketModel("soyuz-2", "Soyuz 2", "Medium-Lift", 46.3, 2.66, 307000, 8400, 8370, 318, 87500,
                (0.8, 0.2, 0.2), "soyuz", "Russian medium-lift vehicle for crew and cargo"),
    RocketModel("proton-m", "Proton M", "Heavy-Lift", 58.3, 7.4, 712000, 23000, 10076, 315, 311000,
                (0.3, 0.2, 0.8), "protonm", "Russian heavy-lift launch vehicle"),
    RocketModel("h3", "H-3", "Heavy-Lift", 63, 4, 445000, 10000, 15100, 440, 240000,
                (0.05, 0.15, 0.55), "h3", "Japan's next-generation heavy-lift launcher"),
    RocketModel("new-glenn", "New Glenn", "Heavy-Lift", 86.6, 7, 1410000, 45000, 17010, 465, 300000,
                (0.25, 0.25, 0.35), "newglenn", "Blue Origin's heavy-lift launch vehicle"),
    RocketModel("vulcan", "Vulcan", "Heavy-Lift", 63, 3.8, 534000, 27200, 14280, 465, 195000,
                (0.2, 0.4, 0.8), "vulcan", "ULA's next-generation heavy-lift vehicle"),
    RocketModel("minotaur-vi", "Minotaur VI", "Medium-Lift", 86, 1.04, 68000, 5000, 1700, 290, 25000,
                (0.4, 0.1, 0.4), "minotaur", "Small-to-medium lift vehicle for small satellite launches"),
    RocketModel("electron", "Electron", "Small-Lift", 17, 1.2, 13000, 300, 520, 303, 11000,
                (0.1, 0.6, 0.1), "electron", "Small-lift launch vehicle for cubesats and small satellites"),
    RocketModel("pegasus-xl", "Pegasus XL", "Air-Launch", 17.6, 1.27, 23130, 443, 1223, 285, 12000,
                (0.7, 0.7, 0.05), "pegasus", "Air-launched orbital launch vehicle"),
    RocketModel("vega-c", "Vega C", "Small-to-Medium Lift", 34.4, 1.575, 137000, 2300, 2890, 312, 42000,
                (0.05, 0.4, 0.8), "vegac", "European small-to-medium lift launch vehicle"),
    RocketModel("relativity-os2", "Relativity OS2", "Small-Lift", 30, 1.6, 24000, 1250, 850, 310, 15000,
                (0.6, 0.2, 0.8), "relativity", "3D-printed small-lift launch vehicle"),
]

_BY_ID = {rocket.id: rocket for rocket in ROCKET_MODELS}


def get_rocket(rocket_id: str) -> RocketModel:
    """Look up a catalog vehicle by id."""
    try:
        return _BY_ID[rocket_id]
    except KeyError:
        raise KeyError(f"Unknown rocket {rocket_id!r}; choose from {sorted(_BY_ID)}") from None


def list_rockets() -> List[str]:
    return [rocket.id for rocket in ROCKET_MODELS]
