"""
Readers for the tab separated ontology input files.

All three inputs share one layout, one entry per line::

    key<TAB><TAB>value1<TAB>value2...

Gene set files map terms to genes, ancestor files map terms to their
ancestors and level files map a level to its member terms. Level files are
read in file order, which is the processing order (most specific first).
"""

import os
import logging
from typing import Dict, List, Optional

from .gene_ontology import GeneOntology

logger = logging.getLogger(__name__)


def read_mapping_file(filepath: str) -> Dict[str, List[str]]:
    """
    Read a tab separated mapping file into an ordered dictionary.

    Args:
        filepath: Path to the mapping file

    Returns:
        Dictionary of key to values, in file order

    Raises:
        FileNotFoundError: If the file does not exist
    """
    if not os.path.exists(filepath):
        raise FileNotFoundError(f"Mapping file not found: {filepath}")

    logger.debug(f"Reading mapping file: {filepath}")
    with open(filepath, 'r') as file:
        lines = file.readlines()

    mapping: Dict[str, List[str]] = {}
    for line in lines:
        line = line.strip("\r\n")
        if not line.strip():
            continue

        if "\t\t" in line:
            name, values_part = line.split("\t\t", 1)
            values = [v.strip() for v in values_part.split("\t") if v.strip()]
        else:
            # Fallback: key, one tab, whitespace separated values
            parts = line.split("\t", 1)
            name = parts[0]
            values = parts[1].split() if len(parts) > 1 else []

        name = name.strip()
        if name in mapping:
            logger.warning(f"Duplicate key {name} in {os.path.basename(filepath)}; merging values.")
            mapping[name].extend(v for v in values if v not in mapping[name])
        else:
            mapping[name] = list(dict.fromkeys(values))

    logger.debug(f"Read {len(mapping)} entries from {os.path.basename(filepath)}.")
    return mapping


class OntologyFiles:
    """
    Paths of the files describing an ontology.
    """

    def __init__(self, gene_sets_path: str, ancestors_path: str, levels_path: str):
        self.gene_sets_path = gene_sets_path
        self.ancestors_path = ancestors_path
        self.levels_path = levels_path

    def load(self, levels: Optional[List[str]] = None) -> GeneOntology:
        """
        Build a GeneOntology from the files.

        Parameters
        ----------
        levels : list of str, optional
            Restrict the level mapping to these levels, in this order.
        """
        logger.info(f"Loading ontology from {self.gene_sets_path}")
        go_to_genes = read_mapping_file(self.gene_sets_path)
        ancestors = read_mapping_file(self.ancestors_path)
        level_map = read_mapping_file(self.levels_path)

        if levels is not None:
            missing = [level for level in levels if level not in level_map]
            if missing:
                logger.warning(f"Levels not found in {self.levels_path}: {missing}")
            level_map = {level: level_map.get(level, []) for level in levels}

        return GeneOntology(go_to_genes, ancestors, level_map)
