#!/usr/bin/env python
"""End-to-end tests of the experiment runner and the CLI (real fixture books)."""

import json
import subprocess
import sys
from pathlib import Path

import pandas as pd
import pytest

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

import run_pipeline
from line_stylometry.core.constants import INTERCEPT_TERM
from line_stylometry.classification import run_classification_experiment, save_classification_results
from line_stylometry.corpus import DirectorySource

from conftest import FIXTURE_DIR, FIXTURE_TITLES, make_documents


class TestExperiment:
    """Test the complete run on the two fixture books."""

    def test_report_shapes(self, fixture_results):
        """Test the four report artifacts of a run."""
        results = fixture_results

        assert results.titles == FIXTURE_TITLES
        assert 0.0 <= results.auc <= 1.0
        assert len(results.probabilities) == len(results.test_ids)
        assert results.confusion.values.sum() == len(results.test_ids)
        assert results.coefficients['term'].iloc[0] == INTERCEPT_TERM
        assert list(results.coefficients.columns) == ['term', 'estimate']

    def test_split_covers_corpus(self, fixture_results):
        """Test that train and test ids partition the corpus."""
        ids = {d.document_id for d in fixture_results.documents}

        assert set(fixture_results.train_ids).isdisjoint(fixture_results.test_ids)
        assert set(fixture_results.train_ids) | set(fixture_results.test_ids) == ids

    def test_probability_table(self, fixture_results):
        """Test the probability table columns and values."""
        table = fixture_results.probabilities

        assert list(table.columns) == ['document_id', 'score', 'probability', 'title', 'is_positive']
        assert table['probability'].between(0, 1).all()
        assert set(table['title']) == set(FIXTURE_TITLES)

    def test_summary(self, fixture_results):
        """Test the run summary."""
        summary = fixture_results.summary()

        assert summary['n_train'] + summary['n_test'] == summary['n_documents']
        assert summary['lambda_1se'] >= summary['lambda_min']
        assert summary['n_nonzero_lambda_1se'] == len(fixture_results.coefficients) - 1

    def test_save(self, fixture_results, tmp_path):
        """Test writing the report files."""
        save_classification_results(fixture_results, tmp_path / 'reports')
        out = tmp_path / 'reports'

        for name in ['coefficients.csv', 'probabilities.csv', 'confusion_matrix.csv', 'cv_results.csv', 'summary.json']:
            assert (out / name).exists(), f"Missing {name}"

        coefs = pd.read_csv(out / 'coefficients.csv')
        assert list(coefs.columns) == ['term', 'estimate']

        confusion = pd.read_csv(out / 'confusion_matrix.csv', index_col=0)
        assert confusion.index.tolist() == FIXTURE_TITLES

        with open(out / 'summary.json') as f:
            summary = json.load(f)
        assert summary['auc'] == pytest.approx(fixture_results.auc)

    def test_separable_books_score_high(self, tmp_path):
        """Test that clearly different books are told apart."""
        documents = make_documents(n_per_title=60, seed=5, title_a=FIXTURE_TITLES[0], title_b=FIXTURE_TITLES[1])

        class InMemorySource:
            def fetch(self, title):
                return [d.raw_text for d in documents if d.title == title]

        results = run_classification_experiment(
            titles=FIXTURE_TITLES,
            positive_title=FIXTURE_TITLES[0],
            source=InMemorySource(),
            min_count=0,
            n_folds=5,
            n_lambda=20
        )

        assert results.auc > 0.9
        assert results.confusion.loc[FIXTURE_TITLES[0], FIXTURE_TITLES[0]] > 10

    @pytest.mark.parametrize("titles,positive", [
        (['Pride and Prejudice'], 'Pride and Prejudice'),
        (['Pride and Prejudice', 'Pride and Prejudice'], 'Pride and Prejudice'),
        (FIXTURE_TITLES + ['Emma'], 'Pride and Prejudice'),
        (FIXTURE_TITLES, 'Emma'),
    ])
    def test_invalid_titles(self, titles, positive):
        """Test that bad title combinations are rejected."""
        with pytest.raises(ValueError):
            run_classification_experiment(titles=titles, positive_title=positive, source=DirectorySource(FIXTURE_DIR))


class TestCLI:
    """Test the command-line runner."""

    def run_main(self, tmp_path, *extra):
        args = [
            '--data-dir', str(FIXTURE_DIR),
            '--min-count', '2',
            '--folds', '5',
            '--n-lambda', '15',
            '--output', str(tmp_path),
            '--no-figures',
        ]
        return run_pipeline.main(args + list(extra))

    def test_run(self, tmp_path, capsys):
        """Test a full CLI run on the fixture books."""
        assert self.run_main(tmp_path, '--inspect', '3') == 0

        out = capsys.readouterr().out
        assert 'Test AUC' in out
        assert 'Confusion matrix' in out
        assert (tmp_path / 'coefficients.csv').exists()

    def test_unknown_title(self, tmp_path):
        """Test the exit status for an unknown title."""
        assert self.run_main(tmp_path, '--titles', 'Pride and Prejudice', 'No Such Book') == 1

    def test_positive_not_compared(self, tmp_path):
        """Test the exit status for a positive title outside the pair."""
        assert self.run_main(tmp_path, '--positive', 'Emma') == 2

    def test_list_titles(self):
        """Test listing catalog titles."""
        script = Path(__file__).parent.parent / 'run_pipeline.py'
        result = subprocess.run([sys.executable, str(script), '--list-titles'], capture_output=True, text=True)

        assert result.returncode == 0, f"List failed: {result.stderr}"
        assert 'Pride and Prejudice' in result.stdout
        assert 'The War of the Worlds' in result.stdout
