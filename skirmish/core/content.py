import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

from catchery import log_warning
from skirmish.combat.action import ActionPayload, payload_from_dict
from skirmish.encounters.combat_encounter import CombatEncounter
from skirmish.encounters.enemy_definition import EnemyDefinition
from skirmish.encounters.player_profile import PlayerProfile

from .config import DEFAULT_RULES, CombatRules, load_rules
from .utils import Singleton, cprint


class ContentRepository(metaclass=Singleton):
    """
    One-stop registry for the content the combat core reads by id.
    """

    enemies: dict[str, EnemyDefinition]
    encounters: dict[str, CombatEncounter]
    payloads: dict[str, ActionPayload]
    players: dict[str, PlayerProfile]
    rules: CombatRules

    def __init__(self, data_dir: Path | None = None) -> None:
        """
        Initialize the ContentRepository.

        Args:
            data_dir (Path | None):
                The directory containing data files to load.

        """
        if data_dir:
            self.reload(Path(data_dir))
            self.loaded = True
        elif not hasattr(self, "loaded"):
            raise ValueError(
                "ContentRepository must be initialized with a valid data_dir on first use."
            )

    def reload(self, root: Path) -> None:
        """
        (Re)load all JSON assets from disk.

        Args:
            root (Path):
                The directory containing data files to load.
        """
        self.enemies = _load_json_file(
            root / "enemies.json",
            self._load_enemies,
            "enemies",
        )
        self.encounters = _load_json_file(
            root / "encounters.json",
            self._load_encounters,
            "encounters",
        )
        self.payloads = _load_json_file(
            root / "payloads.json",
            self._load_payloads,
            "payloads",
        )
        self.players = _load_json_file(
            root / "players.json",
            self._load_players,
            "players",
        )
        rules_file = root / "rules.json"
        self.rules = load_rules(rules_file) if rules_file.exists() else DEFAULT_RULES
        self._check_encounters()

    def _check_encounters(self) -> None:
        """Warns about encounters that reference enemies nobody defined."""
        for encounter in self.encounters.values():
            for entry in encounter.enemies:
                if entry.enemy_id not in self.enemies:
                    log_warning(
                        f"Encounter '{encounter.id}' references unknown enemy "
                        f"'{entry.enemy_id}'.",
                        {"encounter": encounter.id, "enemy_id": entry.enemy_id},
                    )

    def _get_from_collection(self, collection_name: str, item_id: str) -> Any | None:
        """
        Generic helper to get an entry from any collection.

        Args:
            collection_name (str):
                Name of the collection attribute (e.g., 'enemies', 'payloads')
            item_id (str):
                Id of the entry to retrieve

        Returns:
            Any | None:
                The entry if found, None otherwise

        """
        collection = getattr(self, collection_name, None)
        if collection is None:
            log_warning(
                f"Collection '{collection_name}' not found in ContentRepository.",
                {"collection_name": collection_name, "item_id": item_id},
            )
            return None
        entry = collection.get(item_id)
        if entry is None:
            log_warning(
                f"No entry '{item_id}' in collection '{collection_name}'.",
                {"collection_name": collection_name, "item_id": item_id},
            )
        return entry

    def get_enemy(self, enemy_id: str) -> EnemyDefinition | None:
        """Get an enemy definition by id, or None if not found."""
        return self._get_from_collection("enemies", enemy_id)

    def get_encounter(self, encounter_id: str) -> CombatEncounter | None:
        """Get an encounter by id, or None if not found."""
        return self._get_from_collection("encounters", encounter_id)

    def get_payload(self, payload_id: str) -> ActionPayload | None:
        """Get an item or ability payload by id, or None if not found."""
        return self._get_from_collection("payloads", payload_id)

    def get_player(self, player_id: str) -> PlayerProfile | None:
        """Get a player profile by id, or None if not found."""
        return self._get_from_collection("players", player_id)

    @staticmethod
    def _load_enemies(data: list[dict]) -> dict[str, EnemyDefinition]:
        """
        Load enemy definitions from JSON data.

        Raises:
            ValueError: If duplicate enemy ids are found.

        """
        enemies: dict[str, EnemyDefinition] = {}
        for enemy_data in data:
            enemy = EnemyDefinition(**enemy_data)
            if enemy.id in enemies:
                raise ValueError(f"Duplicate enemy id: {enemy.id}")
            enemies[enemy.id] = enemy
        return enemies

    @staticmethod
    def _load_encounters(data: list[dict]) -> dict[str, CombatEncounter]:
        """
        Load encounters from JSON data.

        Raises:
            ValueError: If duplicate encounter ids are found.

        """
        encounters: dict[str, CombatEncounter] = {}
        for encounter_data in data:
            encounter = CombatEncounter(**encounter_data)
            if encounter.id in encounters:
                raise ValueError(f"Duplicate encounter id: {encounter.id}")
            encounters[encounter.id] = encounter
        return encounters

    @staticmethod
    def _load_payloads(data: list[dict]) -> dict[str, ActionPayload]:
        """
        Load item and ability payloads from JSON data.

        Raises:
            ValueError: If duplicate payload ids are found.

        """
        payloads: dict[str, ActionPayload] = {}
        for payload_data in data:
            payload = payload_from_dict(payload_data)
            if payload.id in payloads:
                raise ValueError(f"Duplicate payload id: {payload.id}")
            payloads[payload.id] = payload
        return payloads

    @staticmethod
    def _load_players(data: list[dict]) -> dict[str, PlayerProfile]:
        players: dict[str, PlayerProfile] = {}
        for player_data in data:
            player = PlayerProfile(**player_data)
            if player.id in players:
                raise ValueError(f"Duplicate player id: {player.id}")
            players[player.id] = player
        return players


def _load_json_file(
    filepath: Path,
    loader_func: Callable[[list[dict]], dict[str, Any]],
    description: str,
) -> dict[str, Any]:
    """Helper to load and validate JSON files"""
    try:
        cprint(
            f"  Loading {description} using {loader_func.__name__}...",
            style="bold green",
        )
        if not filepath.exists():
            raise FileNotFoundError(f"File not found: {filepath}")
        if not filepath.is_file():
            raise ValueError(f"Not a file: {filepath}")
        with open(filepath, encoding="utf-8") as f:
            data = json.load(f)
        if not data:
            raise ValueError(f"Empty data list in {filepath}")
        if not isinstance(data, list):
            raise ValueError(f"Expected list in {filepath}, got {type(data).__name__}")
        return loader_func(data)
    except (json.JSONDecodeError, FileNotFoundError, ValueError) as e:
        raise ValueError(f"File {filepath} raised an error: {e}")
