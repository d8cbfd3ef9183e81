"""
ontoelim: Ontology enrichment analysis with the elimination method.
"""

__version__ = '0.1.0'

from .enrichment.hypergeometric import hypergeom_odds_ratio, hypergeom_pval, hypergeom_test
from .ontology.elimination import LevelResults, TermTestResult, process_ontology_level, run_elimination
from .ontology.gene_ontology import GeneOntology
from .pipeline import ElimPipeline

__all__ = [
    'ElimPipeline',
    'GeneOntology',
    'LevelResults',
    'TermTestResult',
    'hypergeom_odds_ratio',
    'hypergeom_pval',
    'hypergeom_test',
    'process_ontology_level',
    'run_elimination',
]
