#!/usr/bin/env python3
"""
Helper utilities for the ontoelim package.
"""

import os
import json
import logging
import pandas as pd
from typing import List, Dict, Any
from datetime import datetime

logger = logging.getLogger(__name__)

def ensure_directory(directory_path: str) -> str:
    """
    Ensure a directory exists, creating it if necessary.

    Args:
        directory_path: Path to the directory

    Returns:
        Absolute path to the directory
    """
    abs_path = os.path.abspath(directory_path)
    os.makedirs(abs_path, exist_ok=True)
    return abs_path

def generate_timestamp() -> str:
    """
    Generate a timestamp string for file naming.

    Returns:
        Formatted timestamp string
    """
    return datetime.now().strftime("%Y%m%d_%H%M%S")

def generate_run_id(gene_list_name: str) -> str:
    return f"{gene_list_name}_{generate_timestamp()}"

def safe_json_serialize(obj: Any) -> Any:
    """
    Serialize objects json cannot handle natively.

    Args:
        obj: Object to serialize

    Returns:
        JSON-serializable object
    """
    if isinstance(obj, (datetime, pd.Timestamp)):
        return obj.isoformat()
    elif isinstance(obj, pd.DataFrame):
        return obj.to_dict(orient='records')
    elif isinstance(obj, (set, frozenset, tuple)):
        return sorted(obj) if isinstance(obj, (set, frozenset)) else list(obj)
    else:
        return str(obj)

def save_metadata(metadata: Dict[str, Any], output_path: str) -> str:
    """
    Save run metadata as JSON.

    Args:
        metadata: Dictionary of metadata
        output_path: Path to save the metadata

    Returns:
        Path to the saved metadata file
    """
    os.makedirs(os.path.dirname(os.path.abspath(output_path)), exist_ok=True)
    with open(output_path, 'w') as f:
        json.dump(metadata, f, default=safe_json_serialize, indent=2)
    logger.debug(f"Metadata saved to {output_path}")
    return output_path

def get_file_extension(file_path: str) -> str:
    """
    Get the file extension from a path.

    Args:
        file_path: Path to the file

    Returns:
        File extension (lowercase, without the dot)
    """
    return os.path.splitext(file_path)[1].lower().lstrip('.')

def read_gene_list(file_path: str) -> List[str]:
    """
    Read a gene list from a file, one gene per line or a JSON list.

    Args:
        file_path: Path to the gene list file

    Returns:
        List of genes in file order

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the JSON content is not a gene list
    """
    if not os.path.exists(file_path):
        raise FileNotFoundError(f"Gene list file not found: {file_path}")

    if get_file_extension(file_path) == 'json':
        with open(file_path, 'r') as f:
            data = json.load(f)
        if isinstance(data, dict) and 'genes' in data:
            data = data['genes']
        if not isinstance(data, list):
            raise ValueError(f"Unexpected JSON format in {file_path}")
        return [str(gene) for gene in data]

    with open(file_path, 'r') as f:
        return [line.strip() for line in f if line.strip()]
