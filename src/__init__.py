"""MovieRec: binary movie recommendation classifier.

This package prepares MovieLens-style ratings for binary classification,
trains and evaluates a scikit-learn classifier on them, and serves single
(user, movie) predictions.

Modules:
    api: FastAPI application and prediction endpoints
    recommender: dataset preparation, training, evaluation and inference
"""

__version__ = "0.1.0"
