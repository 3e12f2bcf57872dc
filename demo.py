from __future__ import annotations

import argparse
import json
from typing import Any

from bom_tree import BOMTreeBackend, BOMTreeSettings
from bom_tree.logging_utils import configure_logging
from bom_tree.serialization import node_to_record
from bom_tree.services.browse import flatten_hierarchy


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run a BOM tree workflow against a live Part service")
    parser.add_argument(
        "--base-url",
        default=None,
        help="Part service base URL (defaults to BOM_TREE_BASE_URL or the built-in default)",
    )
    parser.add_argument("--log-level", default=None, help="Logging level, e.g. DEBUG")
    parser.add_argument(
        "--cleanup",
        action="store_true",
        help="Delete the parts created by this run at the end",
    )
    return parser.parse_args()


def print_section(title: str) -> None:
    print(f"\n=== {title} ===")


def summarize(result: dict[str, Any], show_full: bool = False) -> None:
    if result.get("warnings"):
        print("warnings:")
        for warning in result["warnings"]:
            print(f"- {warning}")

    if show_full:
        print(json.dumps(result.get("data", {}), indent=2, sort_keys=True))


def require_ok(step: str, result: dict[str, Any], show_full: bool = False) -> dict[str, Any]:
    if not result.get("ok"):
        print(f"\n[FAIL] {step}")
        print(json.dumps(result, indent=2, sort_keys=True))
        raise SystemExit(1)

    print(f"[OK] {step}")
    summarize(result, show_full=show_full)
    return result.get("data", {})


def expect_error(step: str, result: dict[str, Any], error_type: str) -> None:
    if result.get("ok") or result.get("error_type") != error_type:
        print(f"\n[FAIL] {step}: expected {error_type}")
        print(json.dumps(result, indent=2, sort_keys=True))
        raise SystemExit(1)
    print(f"[OK] {step} rejected with {error_type}: {result['errors'][0]}")


def print_tree(backend: BOMTreeBackend, root_id: str) -> None:
    roots = [root for root in backend.forest.roots if root.part.id == root_id]
    for row in flatten_hierarchy(roots):
        print(f"{row['title']}  x{row['quantity']}  (extended {row['extended_quantity']})")


def main() -> None:
    args = parse_args()
    overrides: dict[str, Any] = {}
    if args.base_url:
        overrides["base_url"] = args.base_url
    if args.log_level:
        overrides["log_level"] = args.log_level
    settings = BOMTreeSettings(**overrides)
    configure_logging(settings.log_level)

    backend = BOMTreeBackend(settings)
    mutations = backend.mutations

    print_section("Load")
    require_ok("load parts", mutations.refresh())

    print_section("Create Parts")
    top = require_ok(
        "create top assembly",
        mutations.create_part({"title": "Demo Gearbox", "creator": "demo", "stage": "DESIGN", "level": "1"}),
    )["part"]
    shaft = require_ok(
        "create shaft under gearbox",
        mutations.create_child_part(top["id"], {"title": "Demo Shaft", "creator": "demo", "level": "2"}),
    )["part"]
    bearing = require_ok(
        "create bearing under gearbox",
        mutations.create_child_part(top["id"], {"title": "Demo Bearing", "creator": "demo", "level": "3"}, quantity=2),
    )["part"]

    print_section("Usages")
    require_ok("reuse bearing on shaft", mutations.add_child_usage(shaft["id"], bearing["id"], 2))
    expect_error("close a cycle", mutations.add_child_usage(bearing["id"], top["id"], 1), "CycleError")
    expect_error("self usage", mutations.add_child_usage(shaft["id"], shaft["id"], 1), "CycleError")
    expect_error("zero quantity", mutations.add_child_usage(top["id"], shaft["id"], 0), "InvalidQuantity")

    print_section("Tree")
    print_tree(backend, top["id"])
    gearbox = next(root for root in backend.forest.roots if root.part.id == top["id"])
    print(json.dumps(node_to_record(gearbox), indent=2))

    if args.cleanup:
        print_section("Cleanup")
        for part in (bearing, shaft, top):
            require_ok(f"delete {part['id']}", mutations.delete_part(part["id"]))


if __name__ == "__main__":
    main()
