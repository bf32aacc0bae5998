"""
Test cases for corpus.py module
"""

import pytest
import json
import networkx as nx
import pandas as pd

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from topicsum.corpus import (
    CorpusSchema,
    build_coauthor_network,
    iter_documents,
    load_records,
    publication_counts,
    records_to_dataframe,
    tally_list_column,
)
from topicsum.datatypes import Document


@pytest.fixture
def records():
    return [
        {
            "pmid": "101",
            "title": "Castleman disease review",
            "abstract": "Castleman disease is rare. It affects lymph nodes.",
            "authors": ["Fajgenbaum D", "van Rhee F"],
            "country": "USA; UK",
            "grants": "NIH",
            "year": "2019-05-01",
        },
        {
            "doc_id": "102",
            "title": "Siltuximab outcomes",
            "abstract": "Siltuximab improves symptoms.",
            "authors": "van Rhee F; Fajgenbaum D; Munshi N",
            "country": ["USA"],
            "funding_agencies": ["NIH", "CDCN"],
            "publication_year": 2020,
        },
        {
            "pmid": "103",
            "title": "Case report",
            "abstract": "",
            "authors": ["Munshi N"],
            "year": 2019,
        },
    ]


class TestCorpusSchema:
    """Test CorpusSchema enum"""

    def test_colnames(self):
        assert CorpusSchema.ABSTRACT.colname == "abstract"
        assert CorpusSchema.all_colnames()[0] == "doc_id"
        assert len(CorpusSchema.all_colnames()) == len(list(CorpusSchema))

    def test_extractors(self, records):
        assert CorpusSchema.DOC_ID.get_extractor()(records[0]) == "101"
        assert CorpusSchema.AUTHORS.get_extractor()(records[1]) == ["van Rhee F", "Fajgenbaum D", "Munshi N"]
        assert CorpusSchema.PUBLICATION_YEAR.get_extractor()(records[0]) == 2019
        assert CorpusSchema.ABSTRACT.get_extractor()(records[2]) is None


class TestLoading:
    """Test record loading"""

    def test_records_to_dataframe(self, records):
        df = records_to_dataframe(records)
        assert list(df.columns) == CorpusSchema.all_colnames()
        assert df["doc_id"].tolist() == ["101", "102", "103"]
        assert df.loc[0, "country"] == ["USA", "UK"]
        assert df.loc[1, "funding_agencies"] == ["NIH", "CDCN"]

    def test_load_json(self, tmp_path, records):
        path = tmp_path / "records.json"
        path.write_text(json.dumps(records), encoding="utf-8")
        df = load_records(path)
        assert len(df) == 3

    def test_load_jsonl(self, tmp_path, records):
        path = tmp_path / "records.jsonl"
        path.write_text("\n".join(json.dumps(r) for r in records) + "\n\n", encoding="utf-8")
        df = load_records(path)
        assert df["doc_id"].tolist() == ["101", "102", "103"]

    def test_load_non_list(self, tmp_path):
        path = tmp_path / "records.json"
        path.write_text(json.dumps({"pmid": "1"}), encoding="utf-8")
        with pytest.raises(ValueError):
            load_records(path)

    def test_load_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_records(tmp_path / "missing.json")


class TestIterDocuments:
    """Test dataframe to Document iteration"""

    def test_yields_documents(self, records):
        docs = list(iter_documents(records_to_dataframe(records)))
        assert docs[0] == Document("101", "Castleman disease is rare. It affects lymph nodes.")
        assert docs[2] == Document("103", None)

    def test_index_used_without_id_column(self):
        df = pd.DataFrame({"abstract": ["Some text here."]}, index=["x"])
        assert list(iter_documents(df)) == [Document("x", "Some text here.")]

    def test_missing_text_column(self):
        with pytest.raises(ValueError):
            list(iter_documents(pd.DataFrame({"doc_id": [1]})))


class TestStatistics:
    """Test descriptive tallies and the co-author network"""

    def test_publication_counts(self, records):
        counts = publication_counts(records_to_dataframe(records))
        assert counts.name == "publications"
        assert counts.index.tolist() == [2019, 2020]
        assert counts.tolist() == [2, 1]

    def test_tally_authors(self, records):
        tally = tally_list_column(records_to_dataframe(records), "authors")
        assert tally.index.tolist() == ["Fajgenbaum D", "Munshi N", "van Rhee F"]
        assert tally.tolist() == [2, 2, 2]

    def test_tally_top_n(self, records):
        tally = tally_list_column(records_to_dataframe(records), "country", top_n=1)
        assert tally.to_dict() == {"USA": 2}

    def test_tally_missing_column(self, records):
        with pytest.raises(ValueError):
            tally_list_column(records_to_dataframe(records), "keywords")

    def test_coauthor_network(self, records):
        G = build_coauthor_network(records_to_dataframe(records))
        assert isinstance(G, nx.Graph)
        assert G.number_of_nodes() == 3
        assert G["Fajgenbaum D"]["van Rhee F"]["weight"] == 2
        assert G["Munshi N"]["van Rhee F"]["weight"] == 1
