from format_knn.training.validation import LeaveOneOutValidator, ValidationResult, best_setting

__all__ = ['LeaveOneOutValidator', 'ValidationResult', 'best_setting']
