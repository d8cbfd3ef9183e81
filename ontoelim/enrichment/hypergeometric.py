"""
Module for hypergeometric over-representation tests.

Provides the p-value and odds ratio computations shared by the classic
(flat gene set) test and the ontology elimination method.
"""

import logging
from typing import Dict, Iterable, List

import numpy as np
import pandas as pd
from scipy.special import gammaln
from scipy.stats import hypergeom

logger = logging.getLogger(__name__)

RESULT_COLUMNS = ["gene_set", "pval", "odds_ratio", "hits", "gene_set_length"]


def hypergeom_pval(hits: int, set_size: int, universe_minus_set_size: int, trials: int) -> float:
    """
    Probability of observing at least ``hits`` successes.

    Draws ``trials`` items without replacement from a population holding
    ``set_size`` successes and ``universe_minus_set_size`` failures.

    Args:
        hits: Observed number of successes (target genes in the gene set)
        set_size: Number of genes in the gene set
        universe_minus_set_size: Number of universe genes outside the gene set
        trials: Number of target genes

    Returns:
        The upper tail probability P(X >= hits)
    """
    if hits == 0:
        return 1.0

    population = set_size + universe_minus_set_size

    if hits == set_size and hits <= trials:
        # P(X >= m) == P(X == m); the pmf sum loses precision here
        m, n, k, q = (float(x) for x in (set_size, universe_minus_set_size, trials, hits))
        log_prob = (
            gammaln(m + 1.0)
            + gammaln(n + 1.0)
            + gammaln(k + 1.0)
            + gammaln(population - k + 1.0)
            - gammaln(q + 1.0)
            - gammaln(m - q + 1.0)
            - gammaln(k - q + 1.0)
            - gammaln(n - (k - q) + 1.0)
            - gammaln(population + 1.0)
        )
        return float(min(np.exp(log_prob), 1.0))

    upper = min(trials, set_size)
    support = np.arange(hits, upper + 1)
    pval = hypergeom.pmf(support, population, set_size, trials).sum()
    return float(min(pval, 1.0))


def hypergeom_odds_ratio(a1_b1: int, a0_b1: int, a1_b0: int, a0_b0: int) -> float:
    """
    Odds ratio of a 2x2 contingency table, ``(a1_b1 / a0_b1) / (a1_b0 / a0_b0)``.

    Zero cells are not guarded: the result is ``inf`` or ``nan`` in that case.
    """
    with np.errstate(divide="ignore", invalid="ignore"):
        ratio = (np.float64(a1_b1) / np.float64(a0_b1)) / (np.float64(a1_b0) / np.float64(a0_b0))
    return float(ratio)


def count_hits(gene_sets: Iterable[Iterable[str]], target_genes: Iterable[str]) -> List[int]:
    """
    Count the target genes in each gene set.

    Args:
        gene_sets: Gene sets to test
        target_genes: Target genes (duplicates are ignored)

    Returns:
        Number of target genes found in each gene set, in input order
    """
    target = set(target_genes)
    return [len(target.intersection(gene_set)) for gene_set in gene_sets]


def hypergeom_test(
    target_genes: List[str],
    gene_sets: Dict[str, List[str]],
    gene_universe: List[str],
) -> pd.DataFrame:
    """
    Run a classic hypergeometric test of the target genes against flat gene sets.

    Args:
        target_genes: List of genes to test
        gene_sets: Dictionary where keys are set names and values are gene lists
        gene_universe: Background gene population

    Returns:
        DataFrame with one row per gene set
    """
    if not gene_sets:
        logger.warning("No gene sets provided for hypergeometric test.")
        return pd.DataFrame(columns=RESULT_COLUMNS)

    universe_length = len(set(gene_universe))
    target = set(target_genes)
    trials = len(target)

    names = list(gene_sets.keys())
    sets = [set(gene_sets[name]) for name in names]
    set_lengths = [len(s) for s in sets]
    hits = count_hits(sets, target)

    logger.info(f"Testing {len(names)} gene sets with {trials} target genes against a universe of {universe_length}")

    pvals = [
        hypergeom_pval(hit, length, universe_length - length, trials)
        for hit, length in zip(hits, set_lengths)
    ]
    odds_ratios = [
        hypergeom_odds_ratio(hit, length - hit, trials - hit, universe_length - length - trials + hit)
        for hit, length in zip(hits, set_lengths)
    ]

    return pd.DataFrame({
        "gene_set": names,
        "pval": pvals,
        "odds_ratio": odds_ratios,
        "hits": hits,
        "gene_set_length": set_lengths,
    })
