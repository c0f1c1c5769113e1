#!/usr/bin/env python3
"""
Command-line interface for Gear Forge.

Runs engine operations against an inventory snapshot stored as JSON
(either a list of item records or {"items": [...]}). The snapshot file is
only read; mutating commands print the resulting snapshot with --json.
"""

import argparse
import json
import sys
from pathlib import Path

from gearforge.core.config import get_config
from gearforge.core.logging_config import setup_logging
from gearforge.core.models import Slot, PLAYER
from gearforge.core.result import Result
from gearforge.items import Armory, ItemValidationError, load_inventory


def _load_armory(path: str) -> Armory:
    data = json.loads(Path(path).read_text(encoding='utf-8'))
    return Armory(load_inventory(data))


def _fail(message: str) -> None:
    print(f"✗ Error: {message}", file=sys.stderr)
    sys.exit(1)


def _check(result: Result) -> None:
    if not result.success:
        _fail(f"{result.error} [{result.error_code}]")


def _print_snapshot(armory: Armory) -> None:
    print(json.dumps({'items': armory.inventory.to_list()}, indent=2))


def _describe(item) -> str:
    stats = []
    if item.damage is not None:
        stats.append(f"damage {item.damage}")
    if item.armor is not None:
        stats.append(f"armor {item.armor}")
    if item.value is not None:
        stats.append(f"value {item.value}")
    return f"{item.name} [{item.rarity.value} +{item.upgrade_level}] {', '.join(stats)}"


def cmd_preview(args):
    """Show the next upgrade of an item."""
    armory = _load_armory(args.snapshot)
    result = armory.quote(args.item_id)
    _check(result)
    quote = result.data

    if args.json:
        print(json.dumps(quote.to_dict(), indent=2))
        return

    print(_describe(armory.get_item(args.item_id)))
    if not quote.can_upgrade:
        print("  Max upgrade reached")
        return
    print(f"  Cost: {quote.cost}")
    if quote.required_player_level:
        print(f"  Requires player level {quote.required_player_level}")
    if quote.is_rarity_advance:
        print(f"  Next: rarity advance to {quote.next_rarity.value} (stats preserved)")
    for stat, value in quote.preview.to_dict().items():
        print(f"  {stat}: {value}")


def cmd_upgrade(args):
    """Upgrade an item."""
    armory = _load_armory(args.snapshot)
    result = armory.upgrade(args.item_id, gold=args.gold, player_level=args.player_level)
    _check(result)
    receipt = result.data

    if args.json:
        _print_snapshot(armory)
        return

    print(f"✓ Upgraded for {receipt.cost} gold:")
    print(f"  {_describe(armory.get_item(receipt.selected_id))}")
    if receipt.was_split:
        print(f"  Split from stack {args.item_id} as {receipt.selected_id}")


def cmd_equip(args):
    """Equip an item for the player."""
    armory = _load_armory(args.snapshot)
    result = armory.equip(args.item_id, Slot(args.slot) if args.slot else None)
    _check(result)
    change = result.data

    if args.json:
        _print_snapshot(armory)
        return

    print(f"✓ Equipped {change.item_id} to {change.slot.value}")
    for displaced_id in change.displaced:
        print(f"  Unequipped {displaced_id}")


def cmd_unequip(args):
    """Unequip an item."""
    armory = _load_armory(args.snapshot)
    result = armory.unequip(args.item_id)
    _check(result)

    if args.json:
        _print_snapshot(armory)
        return

    if result.data.slot is None:
        print(f"{args.item_id} was not equipped")
    else:
        print(f"✓ Unequipped {args.item_id} from {result.data.slot.value}")


def cmd_assign(args):
    """Give an item to a companion."""
    armory = _load_armory(args.snapshot)
    result = armory.assign(args.item_id, args.companion_id, Slot(args.slot) if args.slot else None)
    _check(result)

    if args.json:
        _print_snapshot(armory)
        return

    print(f"✓ Assigned {result.data.item_id} to {args.companion_id}")


def cmd_unassign(args):
    """Take an item back from its companion."""
    armory = _load_armory(args.snapshot)
    result = armory.unassign(args.item_id)
    _check(result)

    if args.json:
        _print_snapshot(armory)
        return

    print(f"✓ Took {args.item_id} back from {result.data.companion_id}")


def cmd_slots(args):
    """List candidates for a slot."""
    armory = _load_armory(args.snapshot)
    candidates = armory.equippable_for_slot(Slot(args.slot))
    current = armory.get_item_in_slot(Slot(args.slot), args.owner)

    if current:
        print(f"Equipped: {current.id:20} {_describe(current)}")
    if not candidates:
        print("No candidates found")
        return

    print(f"Found {len(candidates)} candidates:\n")
    for item in candidates:
        print(f"  {item.id:20} {_describe(item)}")


def cmd_validate(args):
    """Validate a snapshot file."""
    armory = _load_armory(args.snapshot)
    print(f"✓ {len(armory.inventory)} items valid")


def main():
    """Main CLI entry point."""
    config = get_config()
    setup_logging(level=config.log_level, log_file=config.log_file, use_colors=config.log_colors)

    parser = argparse.ArgumentParser(
        prog='gearforge',
        description='Gear Forge - item upgrade and equipment engine'
    )
    subparsers = parser.add_subparsers(dest='command', help='Command to run')

    slot_choices = [slot.value for slot in Slot]

    parser_preview = subparsers.add_parser('preview', help='Preview the next upgrade')
    parser_preview.add_argument('snapshot', help='Inventory JSON file')
    parser_preview.add_argument('item_id', help='Item ID')
    parser_preview.add_argument('--json', action='store_true', help='Print JSON')
    parser_preview.set_defaults(func=cmd_preview)

    parser_upgrade = subparsers.add_parser('upgrade', help='Upgrade an item')
    parser_upgrade.add_argument('snapshot', help='Inventory JSON file')
    parser_upgrade.add_argument('item_id', help='Item ID')
    parser_upgrade.add_argument('--gold', type=int, help='Check the cost against this much gold')
    parser_upgrade.add_argument('--player-level', type=int, help='Check the level requirement')
    parser_upgrade.add_argument('--json', action='store_true', help='Print the resulting snapshot')
    parser_upgrade.set_defaults(func=cmd_upgrade)

    parser_equip = subparsers.add_parser('equip', help='Equip an item for the player')
    parser_equip.add_argument('snapshot', help='Inventory JSON file')
    parser_equip.add_argument('item_id', help='Item ID')
    parser_equip.add_argument('--slot', choices=slot_choices, help='Target slot (inferred if omitted)')
    parser_equip.add_argument('--json', action='store_true', help='Print the resulting snapshot')
    parser_equip.set_defaults(func=cmd_equip)

    parser_unequip = subparsers.add_parser('unequip', help='Unequip an item')
    parser_unequip.add_argument('snapshot', help='Inventory JSON file')
    parser_unequip.add_argument('item_id', help='Item ID')
    parser_unequip.add_argument('--json', action='store_true', help='Print the resulting snapshot')
    parser_unequip.set_defaults(func=cmd_unequip)

    parser_assign = subparsers.add_parser('assign', help='Give an item to a companion')
    parser_assign.add_argument('snapshot', help='Inventory JSON file')
    parser_assign.add_argument('item_id', help='Item ID')
    parser_assign.add_argument('companion_id', help='Companion ID')
    parser_assign.add_argument('--slot', choices=slot_choices, help='Slot override')
    parser_assign.add_argument('--json', action='store_true', help='Print the resulting snapshot')
    parser_assign.set_defaults(func=cmd_assign)

    parser_unassign = subparsers.add_parser('unassign', help='Take an item back from a companion')
    parser_unassign.add_argument('snapshot', help='Inventory JSON file')
    parser_unassign.add_argument('item_id', help='Item ID')
    parser_unassign.add_argument('--json', action='store_true', help='Print the resulting snapshot')
    parser_unassign.set_defaults(func=cmd_unassign)

    parser_slots = subparsers.add_parser('slots', help='List equippable items for a slot')
    parser_slots.add_argument('snapshot', help='Inventory JSON file')
    parser_slots.add_argument('slot', choices=slot_choices, help='Slot')
    parser_slots.add_argument('--owner', default=PLAYER, help='Whose equipped item to show')
    parser_slots.set_defaults(func=cmd_slots)

    parser_validate = subparsers.add_parser('validate', help='Validate a snapshot file')
    parser_validate.add_argument('snapshot', help='Inventory JSON file')
    parser_validate.set_defaults(func=cmd_validate)

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    try:
        args.func(args)
    except ItemValidationError as e:
        _fail(str(e))
    except (OSError, json.JSONDecodeError) as e:
        _fail(f"Could not read snapshot: {e}")


if __name__ == '__main__':
    main()
