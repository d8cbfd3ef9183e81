import os
import logging
import pandas as pd
from typing import Any, Dict, List, Optional

# Rich for stage announcements
from rich.console import Console

from .config import validate_config
from .ontology.elimination import run_elimination
from .ontology.gene_ontology import GeneOntology
from .ontology.reader import OntologyFiles
from .utils.helpers import ensure_directory, generate_run_id, read_gene_list, save_metadata

logger = logging.getLogger(__name__)


class ElimPipeline:
    """Load an ontology and a target gene list, run the elimination method and save the results."""

    def __init__(self, output_dir: str, config: Optional[Dict[str, Any]] = None, console: Optional[Console] = None):
        self.output_dir = os.path.abspath(output_dir)
        self.config = validate_config(config or {})
        # Rich console for step-by-step progress
        self.console = console or Console()

        logger.debug(f"Pipeline initialized with output directory: {self.output_dir}")
        logger.debug(f"Configuration: {self.config}")

    @staticmethod
    def resolve_universe_size(
        go_obj: GeneOntology,
        gene_universe_size: Optional[int] = None,
        background_genes: Optional[List[str]] = None,
        target_genes: Optional[List[str]] = None,
    ) -> int:
        """
        Size of the gene universe.

        An explicit size wins, then the number of distinct background genes,
        then the number of distinct genes annotated in the ontology. Target
        genes always belong to a derived universe.
        """
        if gene_universe_size is not None:
            return gene_universe_size
        targets = set(target_genes or [])
        if background_genes:
            return len(targets.union(background_genes))
        return len(targets.union(*go_obj.go_to_genes.values()))

    def run(
        self,
        target_genes_path: str,
        gene_sets_path: str,
        ancestors_path: str,
        levels_path: str,
        background_path: Optional[str] = None,
        levels: Optional[List[str]] = None,
    ) -> pd.DataFrame:
        """
        Run the full pipeline.

        Returns the (optionally p-value filtered) results and writes them to
        ``<output_dir>/<run_id>_elim_results.csv``.
        """
        self.console.rule("[bold green]Starting elimination analysis[/bold green]")
        self.console.print(f"[bold]Target genes:[/bold] {target_genes_path}")

        gene_list_name = os.path.splitext(os.path.basename(target_genes_path))[0]
        run_id = generate_run_id(gene_list_name)
        logger.info(f"Run ID: {run_id}")

        try:
            self.console.rule("[bold cyan]Step 1: Loading inputs[/bold cyan]")
            target_genes = read_gene_list(target_genes_path)
            go_obj = OntologyFiles(gene_sets_path, ancestors_path, levels_path).load(levels=levels)
            background_genes = read_gene_list(background_path) if background_path else None

            universe_size = self.resolve_universe_size(
                go_obj, self.config["gene_universe_size"], background_genes, target_genes
            )
            unique_targets = set(target_genes)
            self.console.print(
                f"[bold]Inputs:[/bold] {len(unique_targets)} target genes, {len(go_obj)} terms, "
                f"{len(go_obj.levels)} levels, universe of {universe_size} genes"
            )
            if background_genes is not None:
                outside = unique_targets.difference(background_genes)
                if outside:
                    logger.warning(f"{len(outside)} target genes are not part of the background, adding them to the universe")
            self.console.print("[bold green]Done! Step 1 completed.[/bold green]")

            self.console.rule("[bold cyan]Step 2: Running elimination[/bold cyan]")
            results = run_elimination(
                target_genes,
                go_obj,
                min_genes=self.config["min_genes"],
                gene_universe_length=universe_size,
                elim_threshold=self.config["elim_threshold"],
                debug=self.config["debug"],
                n_jobs=self.config["n_jobs"],
                show_progress=True,
            )
            results_df = results.to_dataframe()
            self.console.print(f"Tested {len(results_df)} terms")
            self.console.print("[bold green]Done! Step 2 completed.[/bold green]")

            self.console.rule("[bold cyan]Step 3: Saving results[/bold cyan]")
            pvalue_threshold = self.config["pvalue_threshold"]
            if pvalue_threshold < 1.0:
                results_df = results_df[results_df["pval"] <= pvalue_threshold].reset_index(drop=True)
                self.console.print(f"{len(results_df)} terms with p-value <= {pvalue_threshold}")

            ensure_directory(self.output_dir)
            output_csv = os.path.join(self.output_dir, f"{run_id}_elim_results.csv")
            results_df.to_csv(output_csv, index=False)
            save_metadata(
                {
                    "run_id": run_id,
                    "target_genes": target_genes_path,
                    "gene_sets": gene_sets_path,
                    "ancestors": ancestors_path,
                    "levels": levels_path,
                    "background": background_path,
                    "gene_universe_size": universe_size,
                    "n_target_genes": len(unique_targets),
                    "n_tested_terms": len(results),
                    "config": self.config,
                },
                os.path.join(self.output_dir, f"{run_id}_metadata.json"),
            )
            self.console.print(f"Results available at: [bold]{output_csv}[/bold]")
            self.console.print("[bold green]Done! Step 3 completed.[/bold green]")
            logger.info(f"Pipeline completed successfully. Results saved to {output_csv}")
            return results_df

        except Exception as e:
            logger.error(f"Error in pipeline: {e}", exc_info=True)
            raise
