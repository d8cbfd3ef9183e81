# ontoelim/ontology/__init__.py
"""
Ontology state, readers and the level-wise elimination method.
"""

from .gene_ontology import GeneOntology
from .elimination import LevelResults, TermTestResult, process_ontology_level, run_elimination
from .reader import OntologyFiles, read_mapping_file

__all__ = [
    'GeneOntology',
    'LevelResults',
    'OntologyFiles',
    'TermTestResult',
    'process_ontology_level',
    'read_mapping_file',
    'run_elimination',
]
