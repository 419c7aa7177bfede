"""Machine learning module for MovieRec.

Turns raw ratings into labelled training and test splits, fits the rating
classifier, evaluates it and scores individual user/movie pairs.
"""
