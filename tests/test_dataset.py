import numpy as np
import pytest

from plsa_em.dataset import Dataset, Feature, load_dataset, load_svmlight, load_triples_csv
from plsa_em.errors import DatasetError


def test_from_documents_layout(two_docs):
    assert two_docs.n_docs == 2
    assert len(two_docs) == 2
    assert two_docs.vocab_size == 3
    assert two_docs.n_occurrences == 4
    assert two_docs.document(0) == [Feature(0, 2.0), Feature(1, 1.0)]
    assert two_docs.document(1) == [Feature(1, 1.0), Feature(2, 3.0)]
    assert two_docs.feature_at(1, 1) == Feature(2, 3.0)
    assert two_docs.doc_ids.tolist() == [0, 0, 1, 1]


def test_feature_at_out_of_range(two_docs):
    with pytest.raises(IndexError):
        two_docs.feature_at(0, 2)


def test_dataset_is_read_only(two_docs):
    with pytest.raises(ValueError):
        two_docs.weights[0] = 5.0


def test_empty_document_is_kept():
    ds = Dataset.from_documents([[(0, 1.0)], [], [(2, 1.0)]])
    assert ds.n_docs == 3
    assert ds.doc_length(1) == 0
    assert ds.document(1) == []
    assert ds.vocab_size == 3


def test_explicit_vocab_size_is_kept():
    ds = Dataset.from_documents([[(0, 1.0)]], vocab_size=10)
    assert ds.vocab_size == 10


@pytest.mark.parametrize("docs", [
    [[(0, -1.0)]],
    [[(-1, 1.0)]],
    [[(0, float("nan"))]],
])
def test_invalid_features_rejected(docs):
    with pytest.raises(DatasetError):
        Dataset.from_documents(docs)


def test_from_tokens_counts():
    ds, vocab = Dataset.from_tokens([["a", "b", "a"], ["b", "c"]])
    assert list(vocab) == ["a", "b", "c"]
    assert sorted(ds.document(0)) == [Feature(0, 2.0), Feature(1, 1.0)]
    assert sorted(ds.document(1)) == [Feature(1, 1.0), Feature(2, 1.0)]


def test_from_tokens_empty_vocabulary():
    with pytest.raises(DatasetError):
        Dataset.from_tokens([[], []])


def test_load_svmlight(tmp_path):
    path = tmp_path / "corpus.svm"
    path.write_text("1 0:2.0 1:1.0\n1 1:1.0 2:3.0\n")
    ds = load_svmlight(str(path))
    assert ds.n_docs == 2
    assert ds.vocab_size == 3
    assert ds.document(0) == [Feature(0, 2.0), Feature(1, 1.0)]
    assert ds.document(1) == [Feature(1, 1.0), Feature(2, 3.0)]


def test_load_triples_csv_keeps_file_order(tmp_path):
    path = tmp_path / "corpus.csv"
    path.write_text("doc,dim,weight\n1,2,3.0\n0,0,2.0\n1,1,1.0\n0,1,1.0\n3,0,1.5\n")
    ds = load_triples_csv(str(path))
    assert ds.n_docs == 4
    assert ds.document(0) == [Feature(0, 2.0), Feature(1, 1.0)]
    assert ds.document(1) == [Feature(2, 3.0), Feature(1, 1.0)]
    assert ds.document(2) == []
    assert ds.document(3) == [Feature(0, 1.5)]


def test_load_triples_csv_missing_column(tmp_path):
    path = tmp_path / "corpus.csv"
    path.write_text("doc,dim\n0,1\n")
    with pytest.raises(DatasetError):
        load_triples_csv(str(path))


def test_load_dataset_missing_file(tmp_path):
    with pytest.raises(DatasetError, match="doesn't exist"):
        load_dataset(str(tmp_path / "nope.svm"))


def test_load_dataset_empty_csv(tmp_path):
    path = tmp_path / "empty.csv"
    path.write_text("doc,dim,weight\n")
    with pytest.raises(DatasetError):
        load_dataset(str(path))


def test_load_dataset_dispatches_on_suffix(tmp_path):
    path = tmp_path / "corpus.csv"
    path.write_text("doc,dim,weight\n0,0,1.0\n")
    ds = load_dataset(str(path))
    assert np.array_equal(ds.dims, [0])


@pytest.mark.parametrize("doc_value", ["1.5", "inf"])
def test_load_triples_csv_rejects_non_integral_doc_ids(tmp_path, doc_value):
    path = tmp_path / "corpus.csv"
    path.write_text(f"doc,dim,weight\n0,0,1.0\n{doc_value},1,1.0\n1,2,1.0\n")
    with pytest.raises(DatasetError, match="doc"):
        load_triples_csv(str(path))


def test_load_svmlight_is_zero_based_without_index_zero(tmp_path):
    path = tmp_path / "corpus.svm"
    path.write_text("1 1:2.0 2:1.0\n1 3:1.0\n")
    ds = load_svmlight(str(path))
    assert ds.vocab_size == 4
    assert ds.document(0) == [Feature(1, 2.0), Feature(2, 1.0)]
    assert ds.document(1) == [Feature(3, 1.0)]


def test_unreadable_svmlight_becomes_dataset_error(tmp_path, monkeypatch):
    path = tmp_path / "corpus.svm"
    path.write_text("1 0:1.0\n")

    def _denied(*args, **kwargs):
        raise PermissionError(13, "Permission denied")

    monkeypatch.setattr("plsa_em.dataset.load_svmlight_file", _denied)
    with pytest.raises(DatasetError, match="Permission denied"):
        load_dataset(str(path))


def test_unreadable_csv_becomes_dataset_error(tmp_path, monkeypatch):
    path = tmp_path / "corpus.csv"
    path.write_text("doc,dim,weight\n0,0,1.0\n")

    def _denied(*args, **kwargs):
        raise PermissionError(13, "Permission denied")

    monkeypatch.setattr("plsa_em.dataset.pd.read_csv", _denied)
    with pytest.raises(DatasetError, match="Permission denied"):
        load_dataset(str(path))
