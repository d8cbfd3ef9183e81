#!/usr/bin/env python3
"""
Pytest configuration and shared fixtures for the ontoelim tests.
"""

import os
import sys
import pytest

# Add the parent directory to sys.path to ensure the module can be imported
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from ontoelim.ontology.gene_ontology import GeneOntology


@pytest.fixture
def two_level_maps():
    """
    Two level ontology: T1 (specific) is a child of T0 (general).
    """
    go_to_genes = {
        "T1": ["A", "B", "C"],
        "T0": ["A", "B", "C", "D", "E"],
    }
    ancestors = {
        "T1": ["T0"],
        "T0": [],
    }
    levels = {
        "2": ["T1"],
        "1": ["T0"],
    }
    return go_to_genes, ancestors, levels


@pytest.fixture
def two_level_ontology(two_level_maps):
    return GeneOntology(*two_level_maps)


@pytest.fixture
def three_level_maps():
    """
    Small tree:

        ROOT
        ├── MID1
        │   ├── LEAF1
        │   └── LEAF2
        └── MID2
            └── LEAF3
    """
    go_to_genes = {
        "LEAF1": ["G1", "G2", "G3", "G4"],
        "LEAF2": ["G5", "G6"],
        "LEAF3": ["G7", "G8", "G9"],
        "MID1": ["G1", "G2", "G3", "G4", "G5", "G6", "G10"],
        "MID2": ["G7", "G8", "G9", "G11", "G12"],
        "ROOT": ["G1", "G2", "G3", "G4", "G5", "G6", "G7", "G8", "G9", "G10", "G11", "G12", "G13"],
    }
    ancestors = {
        "LEAF1": ["MID1", "ROOT"],
        "LEAF2": ["MID1", "ROOT"],
        "LEAF3": ["MID2", "ROOT"],
        "MID1": ["ROOT"],
        "MID2": ["ROOT"],
        "ROOT": [],
    }
    levels = {
        "3": ["LEAF1", "LEAF2", "LEAF3"],
        "2": ["MID1", "MID2"],
        "1": ["ROOT"],
    }
    return go_to_genes, ancestors, levels


@pytest.fixture
def ontology_files(tmp_path, two_level_maps):
    """Write the two level ontology and a target list to tab separated files."""
    go_to_genes, ancestors, levels = two_level_maps

    def write_mapping(name, mapping):
        path = tmp_path / name
        with open(path, 'w') as f:
            for key, values in mapping.items():
                f.write(key + "\t\t" + "\t".join(values) + "\n")
        return str(path)

    target = tmp_path / "target.txt"
    target.write_text("A\nB\nC\n")

    background = tmp_path / "background.txt"
    background.write_text("\n".join(["A", "B", "C", "D", "E", "F", "G", "H", "I", "J"]) + "\n")

    return {
        "target": str(target),
        "gene_sets": write_mapping("gene_sets.txt", go_to_genes),
        "ancestors": write_mapping("ancestors.txt", ancestors),
        "levels": write_mapping("levels.txt", levels),
        "background": str(background),
    }
