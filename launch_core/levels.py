#!/usr/bin/env python3
"""
Level JSON loading utilities.

Level JSON (levels/*.json):
{
  "name": "Human-friendly level name",
  "description": "Optional description",
  "player": {"position": [0.0, 30.0, 0.0], "mass": 1.0, "radius": 0.5},
  "planets": [
    {
      "name": "Rock",
      "mass": 40.0,
      "radius": 4.0,
      "position": [0.0, 0.0, 0.0],
      "tag": "Planet",                 # "Planet" | "Goal" | anything else (ignored on contact)
      "color": [100, 149, 237]
    }
  ]
}

Users can drop their own JSON files into the levels folder and they'll be picked up by the loader.
Unreadable files and malformed planets are skipped with a warning rather than aborting the game.
"""
import json
import logging
import os
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from .constants import PLAYER_COLOR
from .data_models import Body, BodyCategory, Planet
from .vector_utils import Vec3, vec3

logger = logging.getLogger(__name__)

LEVELS_DIR = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "levels")


@dataclass
class Level:
  name: str
  player: Body
  planets: List[Planet] = field(default_factory=list)
  description: str = ""

  @property
  def goals(self) -> List[Planet]:
    return [p for p in self.planets if p.category is BodyCategory.GOAL]

  @property
  def center(self) -> Vec3:
    """Mean position of the player start and every planet."""
    points = [self.player.position] + [p.position for p in self.planets]
    n = float(len(points))
    return (sum(p[0] for p in points) / n, sum(p[1] for p in points) / n, sum(p[2] for p in points) / n)


def _read_json(path: str) -> Optional[dict]:
  try:
    with open(path, "r", encoding="utf-8") as f:
      return json.load(f)
  except (OSError, ValueError) as exc:
    logger.warning("Could not read level file %s: %s", path, exc)
    return None


def _coerce_color(c, default=(100, 149, 237)) -> Tuple[int, int, int]:
  try:
    r, g, b = int(c[0]), int(c[1]), int(c[2])
    r = max(0, min(255, r)); g = max(0, min(255, g)); b = max(0, min(255, b))
    return (r, g, b)
  except (TypeError, ValueError, IndexError):
    return default


def list_levels(levels_dir: str = LEVELS_DIR) -> List[Tuple[str, str]]:
  """Return list of (file_name, display_name) for available levels."""
  items: List[Tuple[str, str]] = []
  if not os.path.isdir(levels_dir):
    return items
  for fn in sorted(os.listdir(levels_dir)):
    if not fn.lower().endswith(".json"):
      continue
    data = _read_json(os.path.join(levels_dir, fn)) or {}
    display = data.get("name") or os.path.splitext(fn)[0]
    items.append((fn, display))
  return items


def parse_planet(data: dict) -> Planet:
  """Build a Planet from a JSON mapping; raises KeyError/TypeError/ValueError on bad input."""
  mass = float(data["mass"])
  radius = float(data["radius"])
  if mass < 0 or radius <= 0:
    raise ValueError(f"planet needs mass >= 0 and radius > 0, got {mass}, {radius}")
  return Planet(
    name=data.get("name", "Planet"),
    mass=mass,
    radius=radius,
    position=vec3(data["position"]),
    category=BodyCategory.from_tag(data.get("tag")),
    color=_coerce_color(data.get("color", [100, 149, 237])),
  )


def parse_level(data: dict, default_name: str = "Level") -> Optional[Level]:
  player_data = data.get("player") or {}
  try:
    player = Body(
      name=player_data.get("name", "Player"),
      mass=float(player_data.get("mass", 1.0)),
      radius=float(player_data.get("radius", 0.5)),
      position=vec3(player_data.get("position", [0.0, 0.0, 0.0])),
      color=_coerce_color(player_data.get("color"), default=PLAYER_COLOR),
    )
  except (TypeError, ValueError, IndexError) as exc:
    logger.warning("Level %s has an invalid player: %s", default_name, exc)
    return None
  if not player.mass > 0:
    logger.warning("Level %s has a player with non-positive mass", default_name)
    return None

  planets: List[Planet] = []
  for i, p in enumerate(data.get("planets", [])):
    try:
      planets.append(parse_planet(p))
    except (KeyError, TypeError, ValueError, IndexError) as exc:
      logger.warning("Skipping planet %d in level %s: %s", i, default_name, exc)
      continue
  return Level(
    name=data.get("name") or default_name,
    player=player,
    planets=planets,
    description=data.get("description", ""),
  )


def load_level(file_name: str, levels_dir: str = LEVELS_DIR) -> Optional[Level]:
  """Load a level JSON by file name. Returns None if the file is missing or unusable."""
  path = os.path.join(levels_dir, file_name)
  data = _read_json(path)
  if not isinstance(data, dict):
    return None
  return parse_level(data, default_name=os.path.splitext(file_name)[0])
