#!/usr/bin/env python3
"""
Standalone script for the classic hypergeometric test against flat gene sets.
"""

import os
import sys
import argparse
import logging

from ontoelim.enrichment.hypergeometric import hypergeom_test
from ontoelim.ontology.reader import read_mapping_file
from ontoelim.utils.helpers import read_gene_list

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s',
    handlers=[logging.StreamHandler()]
)
logger = logging.getLogger(__name__)

def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Perform a hypergeometric test of a gene list against gene sets"
    )

    parser.add_argument(
        "target_genes",
        help="Path to file containing the target gene list"
    )

    parser.add_argument(
        "gene_sets",
        help="Path to the gene set mapping file"
    )

    parser.add_argument(
        "background_genes",
        help="Path to file containing the background gene list"
    )

    parser.add_argument(
        "-o", "--output-file",
        default="./output/hypergeometric.csv",
        help="Path to output CSV file (default: ./output/hypergeometric.csv)"
    )

    parser.add_argument(
        "-p", "--pvalue",
        type=float,
        default=1.0,
        help="Only report gene sets with a p-value at or below this value (default: 1.0)"
    )

    return parser.parse_args(argv)

def main(argv=None):
    """Main entry point for the script."""
    args = parse_args(argv)

    # Check if input files exist
    for file_path, file_name in [
        (args.target_genes, "Target genes"),
        (args.gene_sets, "Gene sets"),
        (args.background_genes, "Background genes")
    ]:
        if not os.path.exists(file_path):
            logger.error(f"{file_name} file not found: {file_path}")
            sys.exit(1)

    # Create output directory if needed
    os.makedirs(os.path.dirname(os.path.abspath(args.output_file)), exist_ok=True)

    try:
        logger.info(f"Using target genes: {args.target_genes}")
        logger.info(f"Using background genes: {args.background_genes}")

        result_df = hypergeom_test(
            target_genes=read_gene_list(args.target_genes),
            gene_sets=read_mapping_file(args.gene_sets),
            gene_universe=read_gene_list(args.background_genes),
        )
        result_df = result_df[result_df["pval"] <= args.pvalue]
        result_df.to_csv(args.output_file, index=False)

        if result_df.empty:
            logger.warning("No gene sets passed the p-value threshold")
        else:
            logger.info(f"Found {len(result_df)} gene sets with p-value <= {args.pvalue}")

        logger.info(f"Results saved to {args.output_file}")

    except (OSError, ValueError) as e:
        logger.error(f"Error performing hypergeometric test: {e}")
        sys.exit(1)

if __name__ == "__main__":
    main()
