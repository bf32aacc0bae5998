"""
corpus.py

Article-metadata corpus helpers: a dataframe schema for article records, loaders
for already-extracted JSON records, document iteration for the summarizer, and
the descriptive tallies and co-author network of the bibliometric analysis.
"""

import json
import logging
import networkx as nx
import pandas as pd
from collections import defaultdict, namedtuple
from enum import Enum
from itertools import combinations
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Union

from .datatypes import Document

logger = logging.getLogger(__name__)

# Each schema column/field is defined with an extractor method that performs
# minimal processing of the raw record field
FieldDef = namedtuple("FieldDef", ["column_name", "extractor", "type"])


def _split_list_field(value) -> List[str]:
    """Accept a list or a ';'-separated string and return stripped, non-empty entries."""
    if value is None:
        return []
    if isinstance(value, str):
        value = value.split(";")
    return [str(v).strip() for v in value if v is not None and str(v).strip()]


def _text_field(value) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def _year_field(value) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        return int(str(value)[:4])
    except ValueError:
        return None


class CorpusSchema(Enum):
    """
    Columns of the article dataframe, extracted from plain dict records
    """
    DOC_ID = FieldDef("doc_id", lambda entry: entry.get("doc_id", entry.get("pmid")), str)
    TITLE = FieldDef("title", lambda entry: _text_field(entry.get("title")), str)
    ABSTRACT = FieldDef("abstract", lambda entry: _text_field(entry.get("abstract")), str)
    AUTHORS = FieldDef("authors", lambda entry: _split_list_field(entry.get("authors")), list)
    AFFILIATIONS = FieldDef("affiliations", lambda entry: _split_list_field(entry.get("affiliations")), list)
    COUNTRY = FieldDef("country", lambda entry: _split_list_field(entry.get("country")), list)
    FUNDING_AGENCIES = FieldDef(
        "funding_agencies",
        lambda entry: _split_list_field(entry.get("funding_agencies", entry.get("grants"))),
        list
    )
    PUBLICATION_YEAR = FieldDef(
        "publication_year",
        lambda entry: _year_field(entry.get("publication_year", entry.get("year"))),
        int
    )

    @property
    def colname(self):
        return self.value.column_name

    def get_extractor(self):
        return self.value.extractor

    @classmethod
    def all_colnames(cls):
        return [field.colname for field in cls]


# ============================================================================
# Loading
# ============================================================================

def records_to_dataframe(records: Iterable[dict]) -> pd.DataFrame:
    """Apply every schema extractor to every record."""
    rows = [{field.colname: field.get_extractor()(record) for field in CorpusSchema} for record in records]
    return pd.DataFrame(rows, columns=CorpusSchema.all_colnames())


def load_records(path: Union[str, Path]) -> pd.DataFrame:
    """
    Load article records from a JSON array file or a JSON-lines file.

    Args:
        path: Path to a .json or .jsonl file

    Returns:
        DataFrame with the CorpusSchema columns
    """
    path = Path(path)
    with open(path, 'r', encoding='utf-8') as f:
        if path.suffix.lower() in ('.jsonl', '.ndjson'):
            records = [json.loads(line) for line in f if line.strip()]
        else:
            records = json.load(f)
    if not isinstance(records, list):
        raise ValueError(f"Expected a list of records in {path}, got {type(records).__name__}")
    logger.info(f"Loaded {len(records)} records from {path}")
    return records_to_dataframe(records)


def iter_documents(df: pd.DataFrame, id_col: str = "doc_id", text_col: str = "abstract") -> Iterator[Document]:
    """
    Yield one Document per row.

    Rows without text are yielded with text=None so the summarizer reports
    them instead of silently dropping them.
    """
    if text_col not in df.columns:
        raise ValueError(f"Column '{text_col}' not found in dataframe")
    ids = df[id_col] if id_col in df.columns else pd.Series(df.index, index=df.index)
    for doc_id, text in zip(ids, df[text_col]):
        yield Document(doc_id, text if isinstance(text, str) else None)


# ============================================================================
# Descriptive Statistics
# ============================================================================

def publication_counts(df: pd.DataFrame, year_col: str = "publication_year") -> pd.Series:
    """Number of publications per year, in ascending year order."""
    years = df[year_col].dropna().astype(int)
    return years.value_counts().sort_index().rename("publications")


def tally_list_column(df: pd.DataFrame, column: str, top_n: Optional[int] = None) -> pd.Series:
    """
    Count occurrences of entries in a list-valued column (authors, affiliations,
    countries, funding agencies). Sorted by count descending, then label.
    """
    if column not in df.columns:
        raise ValueError(f"Column '{column}' not found in dataframe")
    counts = defaultdict(int)
    for cell in df[column]:
        for entry in _split_list_field(cell):
            counts[entry] += 1
    ordered = sorted(counts.items(), key=lambda item: (-item[1], item[0]))
    if top_n is not None:
        ordered = ordered[:top_n]
    return pd.Series(dict(ordered), name=column, dtype="int64")


def build_coauthor_network(df: pd.DataFrame, authors_col: str = "authors") -> nx.Graph:
    """
    Co-author network: authors as nodes, edge weight is the number of
    co-authored documents.
    """
    G = nx.Graph()
    for cell in df[authors_col]:
        authors = sorted(set(_split_list_field(cell)))
        G.add_nodes_from(authors)
        for a, b in combinations(authors, 2):
            if G.has_edge(a, b):
                G[a][b]['weight'] += 1
            else:
                G.add_edge(a, b, weight=1)
    return G
