from __future__ import annotations

from typing import Dict, List, Optional

from domain.models import Intent, ReplyButton

# Format: menu:{name}
_PREFIX = "menu:"

MENU_ACTIONS: Dict[str, Intent] = {
    "training": Intent.START_TRAINING,
    "random": Intent.GET_RANDOM_WORD,
    "stop": Intent.STOP_TRAINING,
    "help": Intent.HELP,
}


def encode_menu_action(name: str) -> str:
    if name not in MENU_ACTIONS:
        raise ValueError(f"Unknown menu action: {name}")
    return f"{_PREFIX}{name}"


def parse_menu_action(action_id: str) -> Optional[Intent]:
    """Return the intent a menu button stands for, or None if unrecognised."""

    if not action_id.startswith(_PREFIX):
        return None
    return MENU_ACTIONS.get(action_id[len(_PREFIX):])


def help_menu() -> List[List[ReplyButton]]:
    return [
        [
            ReplyButton("Start training", encode_menu_action("training")),
            ReplyButton("Stop training", encode_menu_action("stop")),
        ],
        [
            ReplyButton("Random word", encode_menu_action("random")),
            ReplyButton("Help", encode_menu_action("help")),
        ],
    ]
