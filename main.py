"""
Formatting kNN Classifier - Main Entry Point

This script runs the evaluation pipeline for the formatting classifier:
1. Load configuration (via Hydra)
2. Build the corpus from the configured feature-extraction target
3. Sweep k / distance threshold with leave-one-out validation
4. Report per-category results for the best setting
5. Classify a sample query with trace output
"""

import hydra
from hydra.utils import instantiate
from omegaconf import DictConfig, OmegaConf
import numpy as np
from sklearn.metrics import classification_report

from format_knn.config import Config
from format_knn.data.corpus import Corpus
from format_knn.models.KNN import KNNClassifier
from format_knn.training.validation import LeaveOneOutValidator, best_setting


def report_predictions(y_true: np.ndarray, y_pred: np.ndarray) -> None:
    """
    Print abstention count and a per-category report over the answered queries.

    Args:
        y_true: Expected categories
        y_pred: Predicted categories, None where no neighbor voted
    """
    answered = np.array([p is not None for p in y_pred], dtype=bool)
    print(f"   Answered: {answered.sum()} / {len(y_pred)} queries")
    if not answered.any():
        print("   No predictions to report.")
        return
    print(classification_report(
        y_true[answered],
        y_pred[answered].astype(np.int64),
        zero_division=0
    ))


@hydra.main(version_base=None, config_path="configs", config_name="config")
def main(cfg: DictConfig) -> None:
    """Main function to run the formatting classifier pipeline."""
    print("Formatting kNN Classifier")
    print("=" * 40)

    # Validate against the structured schema
    cfg = OmegaConf.merge(OmegaConf.structured(Config), cfg)

    print("\n1. Configuration loaded via Hydra:")
    print(OmegaConf.to_yaml(cfg))

    knn_cfg = cfg.model.knn

    print("\n2. Building corpus...")
    corpus: Corpus = instantiate(cfg.data.corpus)
    corpus.print_summary("Corpus")

    if cfg.validation.enabled and corpus.documents is not None:
        print("\n3. Leave-one-out sweep...")
        validator = LeaveOneOutValidator(corpus, cfg=knn_cfg)
        results = validator.sweep(
            list(cfg.validation.k_values),
            list(cfg.validation.thresholds)
        )
        best_k, best_threshold = best_setting(results)
        best = results[(best_k, best_threshold)]
        print(f"   ✓ Best setting: k={best_k}, threshold={best_threshold} "
              f"(median {best.median_accuracy*100:.1f}%, "
              f"error variance {best.error_variance:.4f})")

        print(f"\n4. Per-Category Report (k={best_k}, threshold={best_threshold}):")
        print(f"   {'='*40}")
        report_predictions(*best.predictions())
    else:
        print("\n3. Validation disabled or corpus has no document names. Skipping.")
        best_k, best_threshold = knn_cfg.k, knn_cfg.distance_threshold

    print("\n5. Sample query (trace enabled)...")
    classifier = KNNClassifier(corpus, cfg=knn_cfg)
    query, label = corpus[0]
    category = classifier.classify(query, k=best_k, distance_threshold=best_threshold, trace=True)
    print(f"   Expected {label}, predicted {category}")

    print("\n" + "="*40)
    print("Pipeline Complete!")


if __name__ == "__main__":
    main()
