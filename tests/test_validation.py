import numpy as np
import pytest
from omegaconf import OmegaConf

from format_knn.config import KNNConfig
from format_knn.data.corpus import Corpus
from format_knn.exceptions import InvalidStateError
from format_knn.training.validation import LeaveOneOutValidator, best_setting


@pytest.fixture
def validator(document_corpus):
    cfg = OmegaConf.structured(KNNConfig(k=1, distance_threshold=0.5))
    return LeaveOneOutValidator(document_corpus, cfg=cfg, log_function=lambda *_: None)


def test_uses_config_defaults(validator):
    assert validator.k == 1
    assert validator.distance_threshold == 0.5


def test_validate_document(validator):
    result = validator.validate_document("a.java")
    assert result.n_samples == 2
    assert list(result.y_pred) == [0, 1]
    assert result.accuracy == pytest.approx(1.0)


def test_abstentions_count_as_errors(validator):
    result = validator.validate_document("c.java")
    assert list(result.y_pred) == [None]
    assert result.n_abstained == 1
    assert result.accuracy == 0.0


def test_validate_documents(validator):
    result = validator.validate_documents()
    assert [d.document for d in result.documents] == ["a.java", "b.java", "c.java"]
    assert result.median_accuracy == pytest.approx(1.0)
    assert result.mean_accuracy == pytest.approx(2 / 3)
    assert result.error_variance == pytest.approx(np.var([0.0, 0.0, 1.0]))

    y_true, y_pred = result.predictions()
    assert list(y_true) == [0, 1, 0, 1, 1]
    assert list(y_pred) == [0, 1, 0, 1, None]


def test_looser_threshold_answers_everything(validator):
    result = validator.validate_documents(distance_threshold=1.0)
    assert sum(d.n_abstained for d in result.documents) == 0


def test_sweep_and_best_setting(validator):
    results = validator.sweep([1, 3], [0.0, 1.0])
    assert set(results) == {(1, 0.0), (1, 1.0), (3, 0.0), (3, 1.0)}
    assert results[(3, 1.0)].k == 3
    assert best_setting(results) == (1, 0.0)


def test_needs_document_names(small_corpus):
    with pytest.raises(InvalidStateError):
        LeaveOneOutValidator(small_corpus)


def test_needs_two_documents():
    corpus = Corpus([[1], [2]], [0, 1], [False], documents=["only.java", "only.java"])
    with pytest.raises(InvalidStateError, match="at least two documents"):
        LeaveOneOutValidator(corpus)


def test_progress_goes_to_log_function(document_corpus):
    lines = []
    LeaveOneOutValidator(document_corpus, log_function=lines.append).validate_documents(k=1)
    assert len(lines) == 3
    assert lines[0].strip().startswith("a.java: 100.0%")
