import numpy as np
import pytest

from plsa_em.dataset import Dataset
from plsa_em.errors import InvalidParameters
from plsa_em.parameters import initialize

from plsa_em.context import TrainingContext


def test_initial_tables_are_normalized(random_docs):
    ctx = TrainingContext.from_dataset(random_docs, n_topics=4)
    params = initialize(ctx, np.random.default_rng(0))

    assert params.topic_prior.shape == (4,)
    assert params.doc_given_topic.shape == (4, random_docs.n_docs)
    assert params.word_given_topic.shape == (4, random_docs.vocab_size)
    assert params.posterior.shape == (4, random_docs.n_occurrences)

    np.testing.assert_allclose(params.topic_prior, 0.25)
    np.testing.assert_allclose(params.doc_given_topic.sum(axis=1), 1.0)
    np.testing.assert_allclose(params.word_given_topic.sum(axis=1), 1.0)
    assert (params.doc_given_topic > 0).all()
    assert (params.word_given_topic > 0).all()


def test_posterior_slices_follow_document_lengths(two_docs):
    ctx = TrainingContext.from_dataset(two_docs, n_topics=2)
    params = initialize(ctx, np.random.default_rng(0))
    for m in range(two_docs.n_docs):
        assert params.posterior_for(m).shape == (2, two_docs.doc_length(m))


def test_same_seed_same_tables(random_docs):
    ctx = TrainingContext.from_dataset(random_docs, n_topics=3)
    a = initialize(ctx, np.random.default_rng(123))
    b = initialize(ctx, np.random.default_rng(123))
    c = initialize(ctx, np.random.default_rng(124))
    assert np.array_equal(a.doc_given_topic, b.doc_given_topic)
    assert np.array_equal(a.word_given_topic, b.word_given_topic)
    assert not np.array_equal(a.word_given_topic, c.word_given_topic)


def test_copy_is_independent(two_docs):
    ctx = TrainingContext.from_dataset(two_docs, n_topics=2)
    params = initialize(ctx, np.random.default_rng(0))
    clone = params.copy()
    clone.topic_prior[0] = 0.9
    assert params.topic_prior[0] == 0.5


def test_zero_topics_rejected(two_docs):
    ctx = TrainingContext.from_dataset(two_docs, n_topics=0)
    with pytest.raises(InvalidParameters):
        initialize(ctx, np.random.default_rng(0))


def test_empty_vocabulary_rejected():
    ds = Dataset.from_documents([[]])
    assert ds.vocab_size == 0
    ctx = TrainingContext.from_dataset(ds, n_topics=2)
    with pytest.raises(InvalidParameters, match="vocabulary"):
        initialize(ctx, np.random.default_rng(0))


def test_empty_document_allocates_empty_slice():
    ds = Dataset.from_documents([[(0, 1.0)], []])
    ctx = TrainingContext.from_dataset(ds, n_topics=2)
    params = initialize(ctx, np.random.default_rng(0))
    assert params.posterior_for(1).shape == (2, 0)
