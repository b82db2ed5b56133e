from __future__ import annotations
import argparse, json, os, sys
from typing import List

from .engine import Engine
from .config import RECIPE, ENTITY_CLASSES, MAX_SUGGESTIONS, CACHE_CAPACITY, TOP_RATED


def _supports_color() -> bool:
    return sys.stdout.isatty() and os.environ.get("NO_COLOR", "") == ""

CSI = "\033["
def _c(text: str, code: str) -> str:
    if not _supports_color(): return text
    return f"{CSI}{code}m{text}{CSI}0m"


def _print_entities(rows: List) -> None:
    if not rows:
        print(_c("(no matches)", "2;37")); return
    print(_c("#  Rating  Name", "1;37"))
    for i, e in enumerate(rows, 1):
        print(f"{i:<2} {e.average_rating:<7.2f} {e.name}")


def _print_names(names: List[str]) -> None:
    if not names:
        print(_c("(no matches)", "2;37")); return
    for i, n in enumerate(names, 1):
        print(f"{i:<2} {n}")


def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser(description="Catalogue index REPL (autocomplete, ranges, stats)")
    p.add_argument("--catalogue", default=None, help="JSON catalogue to import")
    p.add_argument("--db", default=None, help='Store DSN (default "memory://")')
    p.add_argument("--capacity", type=int, default=CACHE_CAPACITY, help="LRU capacity per entity class")
    p.add_argument("-k", type=int, default=MAX_SUGGESTIONS, help="Max suggestions")
    p.add_argument("--mode", choices=list(ENTITY_CLASSES), default=RECIPE, help="Entity class to complete")
    p.add_argument("--q", default=None, help="Single prefix to complete once")
    p.add_argument("--json", action="store_true", help="Emit JSON for --q")
    p.add_argument("--repl", action="store_true", help="Interactive loop after init")
    p.add_argument("--verbose", action="store_true")
    args = p.parse_args(argv)

    eng = Engine(cache_capacity=args.capacity)
    try:
        eng.build(db_dsn=args.db, catalogue=args.catalogue, verbose=args.verbose)
        mode = args.mode

        if args.q is not None:
            names = eng.complete(mode, args.q, args.k)
            if args.json:
                print(json.dumps(names, ensure_ascii=False, indent=2))
            else:
                _print_names(names)

        if not args.repl:
            return 0

        print(f"Type a prefix and press Enter (empty to quit).  [{mode} mode]")
        print(_c("Commands: :mode recipe|ingredient, :top [N], :rating LO HI, :prefix P, :stats, :rebuild", "2;37"))
        while True:
            try:
                raw = input("> ")
            except (EOFError, KeyboardInterrupt):
                print(); break
            if raw == "":
                print("Goodbye!"); break
            parts = raw.strip().split()
            cmd = parts[0].lower() if parts else ""
            try:
                if cmd == ":mode" and len(parts) == 2:
                    if parts[1] not in ENTITY_CLASSES:
                        print(_c(f"(unknown mode {parts[1]!r})", "2;31")); continue
                    mode = parts[1]; print(_c(f"({mode} mode)", "2;36"))
                elif cmd == ":top":
                    n = int(parts[1]) if len(parts) > 1 else TOP_RATED
                    _print_entities(eng.top_rated(n, entity_class=mode))
                elif cmd == ":rating" and len(parts) == 3:
                    _print_entities(eng.by_rating_range(float(parts[1]), float(parts[2]), entity_class=mode))
                elif cmd == ":prefix" and len(parts) == 2:
                    _print_entities(eng.by_name_prefix(parts[1], entity_class=mode))
                elif cmd == ":stats":
                    print(eng.stats())
                elif cmd == ":rebuild":
                    counts = eng.rebuild(eng.store.recipes(), eng.store.ingredients())
                    print(_c(f"(rebuilt: {counts})", "2;36"))
                elif cmd.startswith(":"):
                    print(_c("(unknown command)", "2;31"))
                else:
                    _print_names(eng.complete(mode, raw, args.k))
            except ValueError as exc:
                print(_c(f"(error: {exc})", "2;31"))
        return 0
    finally:
        eng.shutdown()


if __name__ == "__main__":
    sys.exit(main())
