"""Entry point for kitab-tui."""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from kitab_tui import __version__
from kitab_tui.app import KitabApp
from kitab_tui.config import CONFIG_FILE, Config, get_config
from kitab_tui.data import Corpus, CorpusError, demo_corpus
from kitab_tui.history import HistoryStore, JsonFileStore, MemoryStore

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="kitab-tui", description="Terminal reader for the Arabic Bible."
    )
    parser.add_argument("--config", type=Path, default=CONFIG_FILE, help="config file path")
    parser.add_argument("--corpus", type=Path, help="corpus JSON file (default: demo corpus)")
    parser.add_argument("--debug", action="store_true", help="log at DEBUG level")
    parser.add_argument(
        "--no-persist", action="store_true", help="keep history and preferences in memory only"
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def configure_logging(config: Config, debug: bool = False) -> None:
    """Send log records to a file; the terminal belongs to the TUI."""
    level = logging.DEBUG if debug else getattr(logging, config.log_level, logging.WARNING)
    path = config.log_path
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = logging.FileHandler(path, encoding="utf-8")
    except OSError:
        handler = logging.NullHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logging.basicConfig(level=level, handlers=[handler], force=True)


def load_corpus(config: Config, override: Optional[Path] = None) -> Corpus:
    path = override or (Path(config.corpus_path).expanduser() if config.corpus_path else None)
    if path is None:
        logger.info("No corpus configured, using the demo corpus")
        return demo_corpus()
    logger.info("Loading corpus from %s", path)
    return Corpus.load(path)


def main(argv: Optional[List[str]] = None) -> int:
    """Run the kitab-tui application."""
    args = build_parser().parse_args(argv)
    config = get_config(args.config)
    configure_logging(config, args.debug)

    try:
        corpus = load_corpus(config, args.corpus)
    except CorpusError as exc:
        print(f"kitab-tui: {exc}", file=sys.stderr)
        return 1

    backend = MemoryStore() if args.no_persist else JsonFileStore(config.state_path)
    store = HistoryStore(backend, max_entries=config.history_limit)

    app = KitabApp(corpus, store, config)
    app.run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
