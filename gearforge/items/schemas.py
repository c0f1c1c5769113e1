"""
JSON Schema and invariant checks for item records.

Records arriving from outside the engine (a persistence layer, the CLI, a
test fixture) are validated here before they become Item objects:
- ITEM_SCHEMA: structural validation with jsonschema
- validate_item: cross-field invariants (slot/ownership, level ceiling)
- validate_inventory: collection invariants (unique ids, one item per slot per owner)
"""

from typing import Dict, Any, List, Union

import jsonschema

from gearforge.core.models import Item, Inventory, ItemKind, Rarity, Slot, Handedness
from gearforge.core.result import Result, ErrorCode
from .progression import get_upgrade_ceiling


class ItemValidationError(ValueError):
    """Raised when an item record fails schema or invariant validation."""


def _nullable(schema: Dict[str, Any]) -> Dict[str, Any]:
    return {"anyOf": [schema, {"type": "null"}]}


ITEM_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "id": {
            "type": "string",
            "minLength": 1,
            "description": "Opaque unique identifier"
        },
        "name": {
            "type": "string",
            "description": "Display name"
        },
        "kind": {
            "enum": [kind.value for kind in ItemKind],
            "description": "Item category"
        },
        "rarity": _nullable({
            "enum": [rarity.value for rarity in Rarity],
            "description": "Rarity tier"
        }),
        "upgrade_level": _nullable({
            "type": "integer",
            "minimum": 0,
            "description": "Level within the current rarity tier"
        }),
        "max_upgrade_level": _nullable({
            "type": "integer",
            "minimum": 0,
            "description": "Per-item upgrade ceiling override"
        }),
        "damage": _nullable({"type": "number", "minimum": 0}),
        "armor": _nullable({"type": "number", "minimum": 0}),
        "value": _nullable({"type": "number", "minimum": 0}),
        "quantity": {
            "type": "integer",
            "minimum": 1,
            "default": 1,
            "description": "Number of items in stack"
        },
        "equipped": {"type": "boolean", "default": False},
        "slot": _nullable({"enum": [slot.value for slot in Slot]}),
        "equipped_by": _nullable({"type": "string", "minLength": 1}),
        "weight": _nullable({"type": "number", "minimum": 0}),
        "handedness": _nullable({"enum": [h.value for h in Handedness]}),
    },
    "required": ["id", "name", "kind"]
}


def validate_item(item: Item) -> Result:
    """
    Check the cross-field invariants of a single item.

    Returns:
        Result.ok(item) or a VALIDATION_ERROR failure naming the broken rule
    """
    if item.quantity < 1:
        return Result.fail(f"Item {item.id} has quantity {item.quantity}", ErrorCode.VALIDATION_ERROR)

    if item.upgrade_level < 0:
        return Result.fail(f"Item {item.id} has a negative upgrade level", ErrorCode.VALIDATION_ERROR)

    ceiling = get_upgrade_ceiling(item)
    if item.upgrade_level > ceiling:
        return Result.fail(
            f"Item {item.id} is at level {item.upgrade_level}, above its ceiling of {ceiling}",
            ErrorCode.VALIDATION_ERROR
        )

    if item.equipped and (item.slot is None or item.equipped_by is None):
        return Result.fail(f"Equipped item {item.id} needs both a slot and an owner", ErrorCode.VALIDATION_ERROR)

    if not item.equipped and (item.slot is not None or item.equipped_by is not None):
        return Result.fail(f"Unequipped item {item.id} must not keep a slot or owner", ErrorCode.VALIDATION_ERROR)

    return Result.ok(item)


def validate_inventory(inventory: Inventory) -> Result:
    """
    Check every item plus the collection-level invariants.

    Returns:
        Result.ok(inventory) or the first VALIDATION_ERROR found
    """
    seen_ids = set()
    occupied = {}
    for item in inventory:
        result = validate_item(item)
        if not result.success:
            return result

        if item.id in seen_ids:
            return Result.fail(f"Duplicate item id {item.id}", ErrorCode.VALIDATION_ERROR)
        seen_ids.add(item.id)

        if item.equipped:
            key = (item.slot, item.equipped_by)
            if key in occupied:
                return Result.fail(
                    f"Items {occupied[key]} and {item.id} both occupy {item.slot.value} for {item.equipped_by}",
                    ErrorCode.VALIDATION_ERROR
                )
            occupied[key] = item.id

    return Result.ok(inventory)


def load_item(data: Dict[str, Any]) -> Item:
    """
    Validate a raw record and build an Item from it.

    Raises:
        ItemValidationError: If the record fails the schema or an invariant
    """
    try:
        jsonschema.validate(data, ITEM_SCHEMA)
    except jsonschema.ValidationError as e:
        raise ItemValidationError(f"Invalid item record: {e.message}") from e

    item = Item.from_dict(data)
    result = validate_item(item)
    if not result.success:
        raise ItemValidationError(result.error)
    return item


def load_inventory(data: Union[List[Dict[str, Any]], Dict[str, Any]]) -> Inventory:
    """
    Validate and build an Inventory from a list of records or {"items": [...]}.

    Raises:
        ItemValidationError: If any record or a collection invariant is invalid
    """
    if isinstance(data, dict):
        data = data.get('items')
    if not isinstance(data, list):
        raise ItemValidationError("Inventory must be a list of items or an object with an 'items' list")

    inventory = Inventory(tuple(load_item(entry) for entry in data))
    result = validate_inventory(inventory)
    if not result.success:
        raise ItemValidationError(result.error)
    return inventory


__all__ = [
    'ITEM_SCHEMA',
    'ItemValidationError',
    'validate_item',
    'validate_inventory',
    'load_item',
    'load_inventory',
]
