"""Bot personas for simulated games."""

PERSONAS = {
    "cautious": {
        "name": "Cautious",
        "style": "Rehearses up to the cap before rolling. Saves for upgrades.",
        "rehearse_bias": 0.9,   # Chance to rehearse instead of acting when allowed
        "upgrade_bias": 0.9,    # Chance to buy the best affordable upgrade at the office
        "starring_bias": 0.3,   # Chance to prefer a starring role over an extra
    },
    "eager": {
        "name": "Eager",
        "style": "Grabs the biggest role it can and rolls every turn.",
        "rehearse_bias": 0.1,
        "upgrade_bias": 0.5,
        "starring_bias": 0.9,
    },
    "drifter": {
        "name": "Drifter",
        "style": "Wanders the board, takes whatever is going.",
        "rehearse_bias": 0.5,
        "upgrade_bias": 0.2,
        "starring_bias": 0.5,
    },
}


def get_persona(name: str) -> dict:
    """Look up a persona, falling back to the drifter."""
    return PERSONAS.get(name.lower(), PERSONAS["drifter"])
