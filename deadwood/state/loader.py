"""
Static data loader: board and scene deck files to validated models.

Reads YAML (.yaml/.yml) or JSON (.json) files, or dicts that were already
parsed. Every structural problem raises ConfigError naming the source, so a
session is never built from a half-valid board.

Board file:
    rest: Trailer
    locations:
      - {name: Trailer, kind: plain, neighbors: [Main Street]}
      - name: Main Street
        kind: shooting
        takes: 3
        neighbors: [Trailer]
        extras: [{name: Railroad Worker, level: 1, line: "I'm a steel-drivin' man!"}]
      - {name: Casting Office, kind: office, neighbors: [Main Street],
         upgrades: [{level: 2, currency: dollar, cost: 4}]}

Cards file:
    cards:
      - {title: Evil Wears a Hat, budget: 4, scene: 7, description: ...,
         roles: [{name: Mean Pete, level: 1, line: ...}]}
"""

import json
import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from .schema import Board, SceneCard, location_key, slugify

logger = logging.getLogger(__name__)


DATA_DIR = Path(__file__).parent.parent / "data"
DEFAULT_BOARD_PATH = DATA_DIR / "board.yaml"
DEFAULT_CARDS_PATH = DATA_DIR / "cards.yaml"


class ConfigError(Exception):
    """Static data or session parameters are unusable. No session is created."""
    pass


Source = Path | str | dict


# ─── Reading ─────────────────────────────────────────────────

def _read(source: Source) -> tuple[dict, str]:
    """Return (parsed mapping, label for error messages)."""
    if isinstance(source, dict):
        return source, "<data>"

    path = Path(source)
    label = str(path)
    if not path.exists():
        raise ConfigError(f"{label}: file not found")

    text = path.read_text(encoding="utf-8")
    try:
        if path.suffix.lower() == ".json":
            data = json.loads(text)
        else:
            data = yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigError(f"{label}: cannot parse ({e})") from e

    if not isinstance(data, dict):
        raise ConfigError(f"{label}: expected a mapping at the top level")
    return data, label


def _entries(data: dict, key: str, name_field: str, label: str) -> list[dict]:
    entries = data.get(key)
    if not isinstance(entries, list) or not entries:
        raise ConfigError(f"{label}: '{key}' must be a non-empty list")
    for i, entry in enumerate(entries):
        if not isinstance(entry, dict) or not str(entry.get(name_field) or "").strip():
            raise ConfigError(f"{label}: {key}[{i}] needs a {name_field}")
    return entries


def _roles(raw: Any, owner_id: str, owner: str, starring: bool, label: str) -> list[dict]:
    """
    Build role dicts with ids, rejecting duplicate names within one owner.

    owner_id carries a "set:" or "card:" prefix, so an extra and a starring
    role never share an id even when a card is titled like a set.
    """
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise ConfigError(f"{label}: roles of {owner} must be a list")

    roles = []
    seen: set[str] = set()
    for entry in raw:
        if not isinstance(entry, dict) or not str(entry.get("name", "")).strip():
            raise ConfigError(f"{label}: every role of {owner} needs a name")
        key = location_key(entry["name"])
        if key in seen:
            raise ConfigError(f"{label}: duplicate role {entry['name']!r} in {owner}")
        seen.add(key)
        roles.append({
            **entry,
            "id": f"{owner_id}/{slugify(entry['name'])}",
            "starring": starring,
            "occupant": None,
        })
    return roles


# ─── Board ───────────────────────────────────────────────────

def load_board(source: Source = DEFAULT_BOARD_PATH) -> Board:
    """
    Load and validate a board.

    Neighbor lists are symmetrised: an edge listed on one side only is
    added to the other side.

    Raises:
        ConfigError: Unparseable file, bad entries, unknown neighbors,
            disconnected graph, or not exactly one office and one rest area.
    """
    data, label = _read(source)
    entries = _entries(data, "locations", "name", label)

    locations: dict[str, dict] = {}
    for entry in entries:
        name = " ".join(str(entry["name"]).split())
        key = location_key(name)
        if key in locations:
            raise ConfigError(f"{label}: duplicate location {name!r}")

        kind = str(entry.get("kind", "plain")).lower()
        location: dict[str, Any] = {
            "name": name,
            "kind": kind,
            "neighbors": [location_key(str(n)) for n in entry.get("neighbors") or []],
        }
        if kind == "shooting":
            takes = entry.get("takes", 0)
            if not isinstance(takes, int) or takes < 1:
                raise ConfigError(f"{label}: {name} needs at least one take")
            location["takes"] = [{"number": n} for n in range(1, takes + 1)]
            location["extras"] = _roles(entry.get("extras"), f"set:{slugify(name)}", name, False, label)
        elif kind == "office":
            location["upgrades"] = entry.get("upgrades") or []
        locations[key] = location

    # Neighbors must exist; then add any missing reverse edge
    for key, location in locations.items():
        for neighbor in location["neighbors"]:
            if neighbor not in locations:
                raise ConfigError(f"{label}: {location['name']} has unknown neighbor {neighbor!r}")
            if neighbor == key:
                raise ConfigError(f"{label}: {location['name']} lists itself as a neighbor")
    for key, location in locations.items():
        for neighbor in location["neighbors"]:
            back = locations[neighbor]["neighbors"]
            if key not in back:
                back.append(key)

    offices = [k for k, loc in locations.items() if loc["kind"] == "office"]
    if len(offices) != 1:
        raise ConfigError(f"{label}: expected exactly one office, found {len(offices)}")

    plains = [k for k, loc in locations.items() if loc["kind"] == "plain"]
    if data.get("rest"):
        rest_key = location_key(str(data["rest"]))
        if rest_key not in plains:
            raise ConfigError(f"{label}: rest location {data['rest']!r} is not a plain location")
    elif len(plains) == 1:
        rest_key = plains[0]
    else:
        raise ConfigError(f"{label}: expected exactly one rest location, found {len(plains)}")

    try:
        board = Board.model_validate({
            "locations": locations,
            "rest_key": rest_key,
            "office_key": offices[0],
        })
    except ValidationError as e:
        raise ConfigError(f"{label}: invalid board\n{e}") from e

    logger.debug("Loaded board %s: %d locations, %d sets", label, len(board.locations), len(board.sets))
    return board


# ─── Deck ────────────────────────────────────────────────────

def load_deck(source: Source = DEFAULT_CARDS_PATH) -> list[SceneCard]:
    """
    Load and validate the scene deck, in file order.

    Card ids come from the title slug; repeated titles get a numeric suffix.

    Raises:
        ConfigError: Unparseable file, bad entries, or duplicate role names
            on one card.
    """
    data, label = _read(source)
    entries = _entries(data, "cards", "title", label)

    cards: list[SceneCard] = []
    used: set[str] = set()
    for entry in entries:
        title = " ".join(str(entry["title"]).split())
        card_id = str(entry.get("id") or slugify(title))
        base, n = card_id, 2
        while card_id in used:
            card_id = f"{base}-{n}"
            n += 1
        used.add(card_id)

        try:
            cards.append(SceneCard.model_validate({
                "id": card_id,
                "title": title,
                "budget": entry.get("budget"),
                "scene_number": entry.get("scene", entry.get("scene_number", 0)),
                "description": entry.get("description") or "",
                "roles": _roles(entry.get("roles"), f"card:{card_id}", title, True, label),
            }))
        except ValidationError as e:
            raise ConfigError(f"{label}: invalid card {title!r}\n{e}") from e

    logger.debug("Loaded deck %s: %d cards", label, len(cards))
    return cards
