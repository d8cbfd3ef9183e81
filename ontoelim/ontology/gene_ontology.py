"""
Mutable gene ontology state used by the elimination method.
"""

import logging
from types import MappingProxyType
from typing import Dict, Iterable, Mapping, Optional, Set, Tuple

logger = logging.getLogger(__name__)


class GeneOntology:
    """
    Gene ontology with a shrinkable term to gene mapping.

    The term to gene sets are copied on construction and owned by this object,
    so removing genes never touches the caller's data. Ancestors and level
    memberships are stored as read-only views.
    """

    def __init__(
        self,
        go_to_genes: Mapping[str, Iterable[str]],
        ancestors: Optional[Mapping[str, Iterable[str]]] = None,
        levels: Optional[Mapping[str, Iterable[str]]] = None,
    ):
        """
        Parameters
        ----------
        go_to_genes : mapping
            Term identifier to the genes annotated to that term.
        ancestors : mapping, optional
            Term identifier to its ancestor term identifiers.
        levels : mapping, optional
            Level identifier to the term identifiers at that level. The
            iteration order is the default processing order.
        """
        self.go_to_genes: Dict[str, Set[str]] = {
            term: set(genes) for term, genes in go_to_genes.items()
        }
        self.ancestors: Mapping[str, Tuple[str, ...]] = MappingProxyType(
            {term: tuple(ids) for term, ids in (ancestors or {}).items()}
        )
        self.levels: Mapping[str, Tuple[str, ...]] = MappingProxyType(
            {level: tuple(ids) for level, ids in (levels or {}).items()}
        )
        logger.debug(
            f"Initialized GeneOntology with {len(self.go_to_genes)} terms, "
            f"{len(self.ancestors)} ancestor entries and {len(self.levels)} levels."
        )

    def __len__(self) -> int:
        return len(self.go_to_genes)

    def __contains__(self, term: str) -> bool:
        return term in self.go_to_genes

    def get_ancestors(self, term: str) -> Tuple[str, ...]:
        """Ancestors of a term, empty if the term is unknown."""
        return self.ancestors.get(term, ())

    def get_level_ids(self, level: str) -> Tuple[str, ...]:
        """Term identifiers at a level, empty if the level is unknown."""
        return self.levels.get(level, ())

    def get_genes(self, term: str) -> Optional[Set[str]]:
        return self.go_to_genes.get(term)

    def get_genes_list(self, terms: Iterable[str]) -> Dict[str, Set[str]]:
        """
        Current gene sets for the known terms among ``terms``.

        Unknown identifiers are dropped; the result keeps the order of first
        appearance in ``terms``.
        """
        return {term: self.go_to_genes[term] for term in terms if term in self.go_to_genes}

    def remove_genes(self, terms: Iterable[str], genes_to_remove: Iterable[str]) -> None:
        """Remove ``genes_to_remove`` from every known term in ``terms``."""
        genes_to_remove = frozenset(genes_to_remove)
        for term in terms:
            gene_set = self.go_to_genes.get(term)
            if gene_set is not None:
                gene_set.difference_update(genes_to_remove)

    def gene_set_sizes(self) -> Dict[str, int]:
        return {term: len(genes) for term, genes in self.go_to_genes.items()}
