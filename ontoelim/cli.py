import argparse
import sys
import logging

from rich.logging import RichHandler
from rich.console import Console

from .config import get_config
from .pipeline import ElimPipeline

console = Console()
logger = logging.getLogger(__name__)

def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        prog="ontoelim",
        description="Ontology enrichment analysis of a target gene list with the elimination method."
    )
    parser.add_argument("target_genes", help="Path to file containing the target genes, one per line.")
    parser.add_argument("gene_sets", help="Path to the term to genes mapping file.")
    parser.add_argument("ancestors", help="Path to the term to ancestors mapping file.")
    parser.add_argument("levels", help="Path to the level to terms mapping file, most specific level first.")
    parser.add_argument("-o", "--output_dir", default="./output",
                        help="Directory to store final outputs. Default: './output'")
    parser.add_argument("-b", "--background", default=None,
                        help="Path to a background gene list defining the gene universe.")
    parser.add_argument("-c", "--config", default=None,
                        help="Path to a YAML or JSON configuration file.")
    parser.add_argument("--min_genes", type=int, default=None,
                        help="Minimum number of genes for a term to be tested (default 1).")
    parser.add_argument("--elim_threshold", type=float, default=None,
                        help="P-value at or below which a term's genes are removed from its ancestors (default 0.05).")
    parser.add_argument("--gene_universe_size", type=int, default=None,
                        help="Size of the gene universe. Defaults to the background or all annotated genes.")
    parser.add_argument("--pvalue_threshold", type=float, default=None,
                        help="Only report terms with a p-value at or below this value (default 1.0).")
    parser.add_argument("--n_jobs", type=int, default=None,
                        help="Number of threads used to score the terms of a level (default 1).")
    parser.add_argument("--level", action="append", dest="level_order", default=None,
                        help="Process only this level; repeat to define the processing order.")
    parser.add_argument("--debug", action="store_true",
                        help="Trace counts and removed genes at every level.")
    # Argument for controlling verbosity
    parser.add_argument("-v", "--verbosity",
                        default="info",
                        choices=["none", "debug", "info", "warning", "error", "critical"],
                        help="Set logging verbosity. Use 'none' to disable logging. Default is 'info'.")
    return parser.parse_args(argv)

def configure_logging(verbosity: str) -> None:
    if verbosity == "none":
        # Disable all logging
        logging.disable(logging.CRITICAL)
        return
    # Convert string (e.g. "info", "error") to logging constant (e.g. logging.INFO)
    level = getattr(logging, verbosity.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True)]
    )

def main(argv=None):
    args = parse_args(argv)

    verbosity = args.verbosity
    if args.debug and verbosity != "none":
        verbosity = "debug"
    configure_logging(verbosity)

    logger.debug("Debug mode is on.")

    config = get_config(args.config)
    for key in ["min_genes", "elim_threshold", "gene_universe_size", "pvalue_threshold", "n_jobs"]:
        value = getattr(args, key)
        if value is not None:
            config[key] = value
    if args.debug:
        config["debug"] = True

    try:
        pipeline = ElimPipeline(output_dir=args.output_dir, config=config, console=console)
        pipeline.run(
            target_genes_path=args.target_genes,
            gene_sets_path=args.gene_sets,
            ancestors_path=args.ancestors,
            levels_path=args.levels,
            background_path=args.background,
            levels=args.level_order,
        )
        logger.info("Elimination analysis completed successfully.")
        return 0
    except Exception as e:
        logger.error(f"Error running elimination analysis: {e}", exc_info=True)
        return 1

if __name__ == "__main__":
    sys.exit(main())
