"""
train.py - Fits the statistical review model served by CLASSIFIER_BACKEND=model.

Input: CSV with a "review" text column and a "label" column ("fake" | "genuine").
Output: joblib file holding a StandardScaler + LogisticRegression pipeline over
the same signals the service extracts at request time.

Usage:
    python -m classifier_service.app.train data/reviews.csv --out models/review_classifier.joblib
"""
import argparse
import logging
from pathlib import Path
from typing import Sequence

import joblib
import numpy as np
import pandas as pd
from sklearn.linear_model import LogisticRegression
from sklearn.pipeline import Pipeline
from sklearn.preprocessing import StandardScaler

from .features import extract_signals
from .models import Label

logger = logging.getLogger("Trainer")

VALID_LABELS = {Label.FAKE.value, Label.GENUINE.value}


def load_dataset(path: str | Path) -> pd.DataFrame:
    """Reads the CSV, dropping blank reviews and rows with an unknown label."""
    df = pd.read_csv(path)
    missing = {"review", "label"} - set(df.columns)
    if missing:
        raise ValueError(f"Dataset is missing columns: {sorted(missing)}")

    df = df[["review", "label"]].dropna().copy()
    df["review"] = df["review"].astype(str).str.strip()
    df["label"] = df["label"].astype(str).str.strip().str.lower()
    df = df[(df["review"] != "") & df["label"].isin(VALID_LABELS)]
    return df.reset_index(drop=True)


def signal_matrix(reviews: Sequence[str]) -> np.ndarray:
    return np.vstack([extract_signals(r).as_array() for r in reviews])


def fit_model(reviews: Sequence[str], labels: Sequence[str]) -> Pipeline:
    if len(set(labels)) < 2:
        raise ValueError("Training data needs both fake and genuine examples")
    model = Pipeline([
        ("scale", StandardScaler()),
        ("clf", LogisticRegression(max_iter=500)),
    ])
    model.fit(signal_matrix(reviews), np.asarray(labels))
    return model


def save_model(model: Pipeline, path: str | Path) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    joblib.dump(model, path)
    return path


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Train the fake review model")
    parser.add_argument("dataset", help="CSV with review,label columns")
    parser.add_argument("--out", default="models/review_classifier.joblib", help="Output joblib path")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO)
    df = load_dataset(args.dataset)
    logger.info(f"Training on {len(df)} reviews ({(df['label'] == 'fake').sum()} fake)")

    model = fit_model(df["review"].tolist(), df["label"].tolist())
    accuracy = model.score(signal_matrix(df["review"].tolist()), df["label"].to_numpy())
    out = save_model(model, args.out)
    print(f"[Trainer] Training accuracy: {accuracy:.3f}. Model written to {out}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
