# engine/input_handler.py
"""
Maps key names to game actions using the keybinding tables loaded from
``config/keybindings.toml``.
"""
from typing import Any, Dict, Iterable, List

import structlog

log = structlog.get_logger(__name__)

DEFAULT_KEYBINDING_SETS: List[str] = ["common", "movement"]

# Used when no keybinding file could be loaded.
DEFAULT_KEYBINDINGS: Dict[str, Any] = {
    "bindings": {
        "common": {
            "exit": {"key": "escape", "action_type": "action"},
            "exit_alt": {"key": "q", "action_type": "action"},
            "toggle_fullscreen": {"key": "f", "action_type": "action"},
        },
        "movement": {
            "move_up": {"key": "up", "action_type": "move", "dx": 0, "dy": -1},
            "move_down": {"key": "down", "action_type": "move", "dx": 0, "dy": 1},
            "move_left": {"key": "left", "action_type": "move", "dx": -1, "dy": 0},
            "move_right": {"key": "right", "action_type": "move", "dx": 1, "dy": 0},
            "move_up_vi": {"key": "k", "action_type": "move", "dx": 0, "dy": -1},
            "move_down_vi": {"key": "j", "action_type": "move", "dx": 0, "dy": 1},
            "move_left_vi": {"key": "h", "action_type": "move", "dx": -1, "dy": 0},
            "move_right_vi": {"key": "l", "action_type": "move", "dx": 1, "dy": 0},
        },
    }
}

# Action names whose "_alt"/"_alt2" variants resolve to the same action.
_ALT_SUFFIXES = ("_alt2", "_alt")


def _normalize_key(key: str | None) -> str | None:
    if not key:
        return None
    return key.strip().lower()


def _normalize_mods(mods: Iterable[str] | None) -> frozenset:
    normalized = set()
    for mod in mods or ():
        mod_lower = mod.lower()
        if mod_lower == "control":
            mod_lower = "ctrl"
        normalized.add(mod_lower)
    return frozenset(normalized)


def _canonical_action_name(action_name: str) -> str:
    for suffix in _ALT_SUFFIXES:
        if action_name.endswith(suffix):
            return action_name[: -len(suffix)]
    return action_name


class InputHandler:
    """
    Translates key names (``"up"``, ``"k"``, ``"escape"``) into action dicts.
    """

    def __init__(
        self,
        keybindings_config: Dict[str, Any] | None = None,
        active_keybinding_sets: List[str] | None = None,
    ):
        if not keybindings_config or not keybindings_config.get("bindings"):
            log.warning("No keybindings configured, using defaults.")
            keybindings_config = DEFAULT_KEYBINDINGS
        self.keybindings_config: Dict[str, Any] = keybindings_config
        self.active_keybinding_sets: List[str] = (
            active_keybinding_sets or DEFAULT_KEYBINDING_SETS
        )
        log.debug("InputHandler initialized.", sets=self.active_keybinding_sets)

    def get_action(
        self, key: str, mods: Iterable[str] | None = None
    ) -> Dict[str, Any] | None:
        """Finds the action dictionary bound to ``key``; ``None`` if unbound."""
        key_name = _normalize_key(key)
        pressed_mods = _normalize_mods(mods)
        bindings = self.keybindings_config.get("bindings", {})
        for set_name in self.active_keybinding_sets:
            binding_set = bindings.get(set_name)
            if not binding_set or not isinstance(binding_set, dict):
                continue
            for action_name, binding_data in binding_set.items():
                if not isinstance(binding_data, dict):
                    continue
                if _normalize_key(binding_data.get("key")) != key_name:
                    continue
                if _normalize_mods(binding_data.get("mods")) != pressed_mods:
                    continue
                action_type = binding_data.get("action_type")
                if action_type == "move":
                    return {
                        "type": "move",
                        "dx": int(binding_data.get("dx", 0)),
                        "dy": int(binding_data.get("dy", 0)),
                    }
                elif action_type == "action":
                    # Use the action_name from the keybinding as the 'type'
                    return {"type": _canonical_action_name(action_name)}
                else:
                    log.warning(
                        "Unknown action_type in keybinding",
                        action_name=action_name,
                        type=action_type,
                    )
                    return None
        log.debug("Unbound key", key=key_name)
        return None
