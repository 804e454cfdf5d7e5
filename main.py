"""Entry point that lists items of the configured data source."""

from __future__ import annotations

import argparse
import asyncio
import logging
from pathlib import Path
from typing import Sequence

from incremental_list import ItemProviderError, ListController, ListLoadError, create_provider, load_config
from incremental_list.models import ListItem
from incremental_list.search import ACTIVATION_KEY

_LOAD_ERROR_MESSAGE = "Die Liste konnte nicht geladen werden"


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Einträge der konfigurierten Datenquelle auflisten.")
    parser.add_argument("--query", default="", help="Suchbegriff")
    parser.add_argument("--pages", type=int, default=1, help="Anzahl der zu ladenden Seiten")
    parser.add_argument("--select", action="append", default=[], help="Schlüssel eines auszuwählenden Eintrags")
    parser.add_argument("--verbose", action="store_true", help="Debug-Ausgaben aktivieren")
    return parser.parse_args(argv)


def print_row(item: ListItem, _toggle_selection) -> None:
    marker = "[x]" if item.is_selected else "[ ]"
    print(f"{marker} {item.key}  {item.caption}")


async def run(args: argparse.Namespace) -> ListController:
    config = load_config(Path(__file__).parent)
    provider = create_provider(config)
    controller = ListController(config, load_callback=provider.fetch if provider else None)
    task = controller.mount()
    if task is not None:
        await task
    if args.query:
        task = controller.search_callback(ACTIVATION_KEY, args.query)
        if task is not None:
            await task
    for _ in range(1, args.pages):
        # A scroll position at the very bottom requests the next page.
        task = controller.on_scroll(1, 1, 0)
        if task is None:
            break
        await task
    for key in args.select:
        controller.toggle_selection(key)
    return controller


def main(argv: Sequence[str] | None = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        controller = asyncio.run(run(args))
    except (ItemProviderError, ListLoadError) as exc:
        raise SystemExit(f"{_LOAD_ERROR_MESSAGE}: {exc}") from exc
    controller.render_rows(print_row)
    if controller.is_last_page:
        print("Keine weiteren Einträge.")


if __name__ == "__main__":
    main()
