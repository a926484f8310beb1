# catalog/cli.py
from __future__ import annotations

import argparse
import json
import sys
from typing import Any, Dict, Iterable, Optional, Sequence

import httpx

from catalog.client import EDITABLE_FIELDS, CatalogClient, CatalogClientError

# ------------------------------------------------------------
# Output helpers
# ------------------------------------------------------------
_TABLE_COLUMNS = ("id", "name", "collection", "scent_family", "size_ml", "price_thb")


def _print_json(obj: Any) -> None:
    print(json.dumps(obj, indent=2, ensure_ascii=False))


def format_table(rows: Iterable[Dict[str, Any]]) -> str:
    rows = list(rows)
    if not rows:
        return "No perfumes in the catalog."
    cells = [[str(r.get(c, "")) for c in _TABLE_COLUMNS] for r in rows]
    widths = [max(len(c), *(len(row[i]) for row in cells)) for i, c in enumerate(_TABLE_COLUMNS)]
    lines = ["  ".join(c.ljust(w) for c, w in zip(_TABLE_COLUMNS, widths))]
    lines.append("  ".join("-" * w for w in widths))
    lines.extend("  ".join(v.ljust(w) for v, w in zip(row, widths)) for row in cells)
    return "\n".join(lines)


def _field_args(args: argparse.Namespace) -> Dict[str, Any]:
    return {f: getattr(args, f) for f in EDITABLE_FIELDS if getattr(args, f, None) is not None}


# ------------------------------------------------------------
# CLI
# ------------------------------------------------------------
def _add_field_options(p: argparse.ArgumentParser, *, required: bool) -> None:
    p.add_argument("--name", required=required, help="Perfume name.")
    p.add_argument("--collection", required=required, help="Collection label.")
    p.add_argument("--scent-family", dest="scent_family", required=required, help="Scent family label.")
    p.add_argument("--size-ml", dest="size_ml", required=required, help="Bottle size in ml.")
    p.add_argument("--price-thb", dest="price_thb", required=required, help="Price in THB.")
    p.add_argument("--description", help="Free text description.")
    p.add_argument("--image-url", dest="image_url", help="Image URL.")


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="catalog-cli",
        description="List, add, edit and delete perfumes through the catalog service.",
    )
    p.add_argument("--url", default=None, help="Service base URL (default: CATALOG_API_URL).")
    sub = p.add_subparsers(dest="command", required=True)

    sub.add_parser("health", help="Show service and store status.")

    ls = sub.add_parser("list", help="List perfumes.")
    ls.add_argument("--collection", help="Only this collection.")
    ls.add_argument("--scent-family", dest="scent_family", help="Only this scent family.")
    ls.add_argument("--q", help="Name contains (case-insensitive).")
    ls.add_argument("--json", action="store_true", help="Print JSON instead of a table.")

    show = sub.add_parser("show", help="Show one perfume.")
    show.add_argument("id", type=int)

    add = sub.add_parser("add", help="Add a perfume.")
    _add_field_options(add, required=True)

    edit = sub.add_parser("edit", help="Edit a perfume; unspecified fields keep their value.")
    edit.add_argument("id", type=int)
    _add_field_options(edit, required=False)

    rm = sub.add_parser("delete", help="Delete a perfume.")
    rm.add_argument("id", type=int)
    rm.add_argument("--yes", action="store_true", help="Do not ask for confirmation.")
    return p


def run(args: argparse.Namespace, client: CatalogClient) -> int:
    if args.command == "health":
        _print_json(client.health())
    elif args.command == "list":
        rows = client.refresh(collection=args.collection, scent_family=args.scent_family, q=args.q)
        if args.json:
            _print_json(rows)
        else:
            print(format_table(rows))
    elif args.command == "show":
        _print_json(client.get(args.id))
    elif args.command == "add":
        client.reset_form()
        client.update_form(**_field_args(args))
        _print_json(client.submit())
    elif args.command == "edit":
        client.refresh()
        client.start_edit(args.id)
        client.update_form(**_field_args(args))
        _print_json(client.submit())
    elif args.command == "delete":
        if not args.yes:
            answer = input(f"Delete perfume {args.id}? [y/N] ").strip().lower()
            if answer not in {"y", "yes"}:
                print("Aborted.")
                return 1
        client.delete(args.id)
        print(f"Deleted perfume {args.id}.")
    return 0


def main(argv: Optional[Sequence[str]] = None, *, http: Optional[httpx.Client] = None) -> int:
    args = build_parser().parse_args(argv)
    with CatalogClient(args.url, http=http) as client:
        try:
            return run(args, client)
        except CatalogClientError as exc:
            print(f"Error: {exc.message}", file=sys.stderr)
            return 1


if __name__ == "__main__":
    sys.exit(main())
