"""IRLens CLI - Inspect IR2Vec vocabularies and embed IR modules."""

import argparse
import importlib
import logging
import sys
from dataclasses import replace

from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from irlens.config import EmbeddingConfig
from irlens.embeddings.embedder import Embedder, EmbedderKind
from irlens.ir.base import Context, Module
from irlens.report import print_embeddings, print_vocabulary
from irlens.retrieval.index import FunctionIndex
from irlens.vocab.errors import VocabularyMissError
from irlens.vocab.store import SECTIONS, VocabularyStore

console = Console(stderr=True)


def _config_from_args(args: argparse.Namespace) -> EmbeddingConfig:
    """Environment defaults, overridden by whatever flags were given."""
    config = EmbeddingConfig.from_env()
    overrides = {
        "vocab_path": args.vocab_path,
        "opc_weight": args.opc_weight,
        "type_weight": args.type_weight,
        "arg_weight": args.arg_weight,
    }
    overrides = {k: v for k, v in overrides.items() if v is not None}
    if args.strict:
        overrides["strict"] = True
    return replace(config, **overrides)


def _load_vocabulary(config: EmbeddingConfig, context: Context):
    """Run the vocabulary store; report diagnostics and return None on failure."""
    store = VocabularyStore(config=config)
    result = store.run(context)
    if not result.is_valid:
        for message in context.errors:
            console.print(f"[red]Error:[/red] {message}")
        return None
    return result.vocabulary


def _load_module(target: str) -> Module:
    """
    Resolve a "package.module:attribute" target to an IR Module.

    The attribute may be a Module or a zero-argument callable returning one.
    """
    module_path, _, attr = target.partition(":")
    if not attr:
        raise ValueError(f"Expected 'package.module:attribute', got '{target}'")

    try:
        obj = getattr(importlib.import_module(module_path), attr)
    except (ImportError, AttributeError) as e:
        raise ValueError(f"Cannot load '{target}': {e}") from e

    if callable(obj) and not isinstance(obj, Module):
        obj = obj()
    if not isinstance(obj, Module):
        raise ValueError(f"{target} did not produce an IR Module")
    return obj


def cmd_vocab(args: argparse.Namespace) -> int:
    """Print every vocabulary entry with its weighted vector."""
    vocab = _load_vocabulary(_config_from_args(args), Context())
    if vocab is None:
        return 1
    print_vocabulary(vocab, sys.stdout)
    return 0


def cmd_stats(args: argparse.Namespace) -> int:
    """Show per-section sizes and the dimension of the vocabulary."""
    config = _config_from_args(args)
    vocab = _load_vocabulary(config, Context())
    if vocab is None:
        return 1

    table = Table(title="Vocabulary Stats")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Path", config.vocab_path)
    table.add_row("Entries", str(len(vocab)))
    table.add_row("Dimension", str(vocab.dimension))
    for section, weight in zip(SECTIONS, config.weights):
        table.add_row(f"{section} weight", f"{weight:g}")

    console.print(table)
    return 0


def cmd_embed(args: argparse.Namespace) -> int:
    """Print function, block and instruction vectors for an IR module."""
    module = _load_module(args.target)
    config = _config_from_args(args)
    vocab = _load_vocabulary(config, module.context)
    if vocab is None:
        return 1
    print_embeddings(module, vocab, sys.stdout, strict=config.strict)
    return 0


def cmd_index(args: argparse.Namespace) -> int:
    """Embed every function of a module and store it for similarity search."""
    module = _load_module(args.target)
    config = _config_from_args(args)
    vocab = _load_vocabulary(config, module.context)
    if vocab is None:
        return 1

    index = FunctionIndex(db_path=args.db_path)
    with console.status("[bold green]Embedding functions..."):
        stored = index.store_module(module, vocab, strict=config.strict)

    console.print(f"[bold]Indexed[/bold] {stored} function(s) from {module.name}")
    return 0


def cmd_search(args: argparse.Namespace) -> int:
    """Find indexed functions similar to one function of a module."""
    module = _load_module(args.target)
    func = module.get_function(args.function)
    if func is None:
        console.print(f"[red]Error:[/red] No function named '{args.function}' in {module.name}")
        return 1

    config = _config_from_args(args)
    vocab = _load_vocabulary(config, module.context)
    if vocab is None:
        return 1

    vector = Embedder.create(EmbedderKind.SYMBOLIC, func, vocab, strict=config.strict).get_function_vector()
    results = FunctionIndex(db_path=args.db_path).search(vector, top_k=args.top_k)
    if not results:
        console.print("[yellow]No similar functions found.[/yellow]")
        return 0

    table = Table(title=f"Functions similar to {func.name}")
    table.add_column("Function", style="cyan")
    table.add_column("Module")
    table.add_column("Blocks", justify="right")
    table.add_column("Similarity", style="green", justify="right")
    for result in results:
        meta = result["metadata"]
        table.add_row(
            meta["function"],
            meta["module"],
            str(meta["blocks"]),
            f"{1 - result['distance']:.2%}",
        )
    console.print(table)
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        prog="irlens",
        description="Symbolic IR2Vec embeddings for IR functions, blocks and instructions",
    )
    parser.add_argument("--vocab-path", help="Path to the vocabulary JSON file ('-' for stdin)")
    parser.add_argument("--opc-weight", type=float, help="Weight for opcode embeddings (default: 1.0)")
    parser.add_argument("--type-weight", type=float, help="Weight for type embeddings (default: 0.5)")
    parser.add_argument("--arg-weight", type=float, help="Weight for argument embeddings (default: 0.2)")
    parser.add_argument("--strict", action="store_true", help="Fail on vocabulary misses")
    parser.add_argument(
        "--db-path",
        default="./irlens_db",
        help="Path to the function vector database (default: ./irlens_db)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    vocab_parser = subparsers.add_parser("vocab", help="Print the weighted vocabulary")
    vocab_parser.set_defaults(func=cmd_vocab)

    stats_parser = subparsers.add_parser("stats", help="Show vocabulary statistics")
    stats_parser.set_defaults(func=cmd_stats)

    embed_parser = subparsers.add_parser("embed", help="Print embeddings for an IR module")
    embed_parser.add_argument("target", help="IR module as 'package.module:attribute'")
    embed_parser.set_defaults(func=cmd_embed)

    index_parser = subparsers.add_parser("index", help="Store function vectors of an IR module")
    index_parser.add_argument("target", help="IR module as 'package.module:attribute'")
    index_parser.set_defaults(func=cmd_index)

    search_parser = subparsers.add_parser("search", help="Find functions similar to a given one")
    search_parser.add_argument("target", help="IR module as 'package.module:attribute'")
    search_parser.add_argument("function", help="Name of the function to compare against")
    search_parser.add_argument(
        "-k", "--top-k",
        type=int,
        default=5,
        help="Number of results to return (default: 5)",
    )
    search_parser.set_defaults(func=cmd_search)

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )

    try:
        return args.func(args)
    except (ValueError, VocabularyMissError) as e:
        console.print(f"[red]Error:[/red] {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
