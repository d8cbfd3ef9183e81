"""
Gene ontology enrichment with the elimination method.

Levels are processed from the most specific to the most general. Whenever a
term is significantly enriched, its genes are removed from all of its
ancestors before those ancestors are tested.
"""

import logging
from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, Iterator, List, Optional, Tuple

import pandas as pd
from joblib import Parallel, delayed
from tqdm.auto import tqdm

from ..enrichment.hypergeometric import hypergeom_odds_ratio, hypergeom_pval
from .gene_ontology import GeneOntology

logger = logging.getLogger(__name__)

RESULT_COLUMNS = ["level", "go_id", "pval", "odds_ratio", "hits", "gene_set_length"]


@dataclass(frozen=True)
class TermTestResult:
    """Hypergeometric test result for a single ontology term."""
    term_id: str
    pval: float
    odds_ratio: float
    hits: int
    gene_set_length: int
    level: Optional[str] = None


@dataclass
class LevelResults:
    """Parallel result sequences for one or more processed levels."""
    go_ids: List[str] = field(default_factory=list)
    pvals: List[float] = field(default_factory=list)
    odds_ratios: List[float] = field(default_factory=list)
    hits: List[int] = field(default_factory=list)
    gene_set_lengths: List[int] = field(default_factory=list)
    levels: List[Optional[str]] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.go_ids)

    def append(self, result: TermTestResult) -> None:
        self.go_ids.append(result.term_id)
        self.pvals.append(result.pval)
        self.odds_ratios.append(result.odds_ratio)
        self.hits.append(result.hits)
        self.gene_set_lengths.append(result.gene_set_length)
        self.levels.append(result.level)

    def extend(self, other: "LevelResults") -> None:
        self.go_ids.extend(other.go_ids)
        self.pvals.extend(other.pvals)
        self.odds_ratios.extend(other.odds_ratios)
        self.hits.extend(other.hits)
        self.gene_set_lengths.extend(other.gene_set_lengths)
        self.levels.extend(other.levels)

    def records(self) -> Iterator[TermTestResult]:
        for row in zip(self.go_ids, self.pvals, self.odds_ratios, self.hits, self.gene_set_lengths, self.levels):
            yield TermTestResult(*row)

    def to_dataframe(self) -> pd.DataFrame:
        return pd.DataFrame({
            "level": self.levels,
            "go_id": self.go_ids,
            "pval": self.pvals,
            "odds_ratio": self.odds_ratios,
            "hits": self.hits,
            "gene_set_length": self.gene_set_lengths,
        }, columns=RESULT_COLUMNS)


def score_term(
    term: str,
    genes: FrozenSet[str],
    target_set: FrozenSet[str],
    gene_universe_length: int,
    level: Optional[str] = None,
) -> TermTestResult:
    """
    Run the hypergeometric test for one term.

    Only reads its arguments, so terms of a level can be scored concurrently.
    """
    trials = len(target_set)
    gene_set_length = len(genes)
    hits = len(target_set.intersection(genes))
    pval = hypergeom_pval(hits, gene_set_length, gene_universe_length - gene_set_length, trials)
    odds_ratio = hypergeom_odds_ratio(
        hits,
        gene_set_length - hits,
        trials - hits,
        gene_universe_length - gene_set_length - trials + hits,
    )
    return TermTestResult(term, pval, odds_ratio, hits, gene_set_length, level)


def process_ontology_level(
    target_genes: Iterable[str],
    level: str,
    go_obj: GeneOntology,
    min_genes: int,
    gene_universe_length: int,
    elim_threshold: float,
    debug: bool = False,
    n_jobs: int = 1,
    trace_logger: Optional[logging.Logger] = None,
) -> LevelResults:
    """
    Test all terms of one ontology level and apply the elimination.

    Parameters
    ----------
    target_genes : iterable of str
        Genes to test for over-representation. Duplicates are ignored.
    level : str
        Identifier of the level to process.
    go_obj : GeneOntology
        Ontology state. Ancestors of eliminated terms are modified in place.
    min_genes : int
        Terms with fewer genes than this are neither tested nor eliminated.
    gene_universe_length : int
        Size of the gene universe.
    elim_threshold : float
        Terms with a p-value at or below this threshold are eliminated.
    debug : bool
        Emit DEBUG records with counts and removed genes on ``trace_logger``.
    n_jobs : int
        Number of threads used to score the terms of the level.
    trace_logger : logging.Logger, optional
        Destination of the debug trace. Defaults to this module's logger.

    Returns
    -------
    LevelResults
        Results for the tested terms, in level member order.
    """
    log = trace_logger or logger
    target_set = frozenset(target_genes)

    # Snapshot the gene sets so scoring never sees mutations of this level
    level_data = go_obj.get_genes_list(go_obj.get_level_ids(level))
    snapshot: List[Tuple[str, FrozenSet[str]]] = [
        (term, frozenset(genes)) for term, genes in level_data.items() if len(genes) >= min_genes
    ]

    if debug:
        log.debug(
            f"Level {level}: {len(level_data)} terms with genes, "
            f"{len(snapshot)} pass the minimum of {min_genes} genes."
        )

    if n_jobs == 1 or len(snapshot) < 2:
        scored = [score_term(term, genes, target_set, gene_universe_length, level) for term, genes in snapshot]
    else:
        scored = Parallel(n_jobs=n_jobs, prefer="threads")(
            delayed(score_term)(term, genes, target_set, gene_universe_length, level) for term, genes in snapshot
        )

    res = LevelResults()
    for result in scored:
        if debug:
            log.debug(
                f"Term {result.term_id}: {result.gene_set_length} genes tested, "
                f"{result.hits} hits, p-value {result.pval:.3g}."
            )
        res.append(result)

    go_to_remove = [result.term_id for result in scored if result.pval <= elim_threshold]

    if debug:
        log.debug(
            f"At level {level} a total of {len(go_to_remove)} gene ontology terms "
            f"will be affected by elimination: {go_to_remove}"
        )

    for term in go_to_remove:
        ancestors = go_obj.get_ancestors(term)
        genes_to_remove = go_obj.get_genes(term)
        if genes_to_remove is None:
            continue
        genes_to_remove = frozenset(genes_to_remove)
        if debug:
            log.debug(f"Removing {sorted(genes_to_remove)} from ancestors {list(ancestors)} of {term}.")
        go_obj.remove_genes(ancestors, genes_to_remove)
        if debug:
            for ancestor in ancestors:
                remaining = go_obj.get_genes(ancestor)
                log.debug(
                    f"Ancestor {ancestor} keeps "
                    f"{sorted(remaining) if remaining is not None else 'no genes'}."
                )

    return res


def run_elimination(
    target_genes: Iterable[str],
    go_obj: GeneOntology,
    levels: Optional[Iterable[str]] = None,
    min_genes: int = 1,
    gene_universe_length: Optional[int] = None,
    elim_threshold: float = 0.05,
    debug: bool = False,
    n_jobs: int = 1,
    show_progress: bool = False,
    trace_logger: Optional[logging.Logger] = None,
) -> LevelResults:
    """
    Run the elimination method over the ontology levels.

    Parameters
    ----------
    target_genes : iterable of str
        Genes to test for over-representation.
    go_obj : GeneOntology
        Ontology state, modified in place.
    levels : iterable of str, optional
        Levels in processing order, most specific first. Defaults to the
        order of the ontology's level mapping.
    min_genes : int
        Minimum gene set size for a term to be tested.
    gene_universe_length : int, optional
        Size of the gene universe. Defaults to the number of distinct genes
        annotated in the ontology or present in the target list. Must hold
        every target gene and the largest gene set.
    elim_threshold : float
        P-value threshold for the elimination.
    debug : bool
        Emit a DEBUG trace of counts and removed genes.
    n_jobs : int
        Threads used to score the terms within a level.
    show_progress : bool
        Show a progress bar over the levels.
    trace_logger : logging.Logger, optional
        Destination of the debug trace.

    Returns
    -------
    LevelResults
        Results of all levels, concatenated in processing order.
    """
    log = trace_logger or logger
    target_genes = list(dict.fromkeys(target_genes))

    if gene_universe_length is None:
        gene_universe_length = len(set(target_genes).union(*go_obj.go_to_genes.values()))
    if gene_universe_length <= 0:
        raise ValueError(f"gene_universe_length must be positive, got {gene_universe_length}")
    if min_genes < 0:
        raise ValueError(f"min_genes must be non-negative, got {min_genes}")
    if not 0.0 <= elim_threshold <= 1.0:
        raise ValueError(f"elim_threshold must be between 0 and 1, got {elim_threshold}")
    # Both the draws and every gene set must fit in the universe
    if len(target_genes) > gene_universe_length:
        raise ValueError(
            f"{len(target_genes)} target genes do not fit in a universe of {gene_universe_length} genes"
        )
    largest_set = max(go_obj.gene_set_sizes().values(), default=0)
    if largest_set > gene_universe_length:
        raise ValueError(
            f"A gene set of {largest_set} genes does not fit in a universe of {gene_universe_length} genes"
        )

    level_order = list(go_obj.levels.keys()) if levels is None else list(levels)
    log.info(
        f"Running elimination over {len(level_order)} levels with {len(target_genes)} target genes, "
        f"universe of {gene_universe_length} and threshold {elim_threshold}"
    )

    results = LevelResults()
    for level in tqdm(level_order, desc="Processing levels", unit="level", disable=not show_progress):
        level_res = process_ontology_level(
            target_genes,
            level,
            go_obj,
            min_genes=min_genes,
            gene_universe_length=gene_universe_length,
            elim_threshold=elim_threshold,
            debug=debug,
            n_jobs=n_jobs,
            trace_logger=log,
        )
        results.extend(level_res)

    log.info(f"Tested {len(results)} terms across {len(level_order)} levels")
    return results
