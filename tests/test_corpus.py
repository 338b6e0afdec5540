"""Tests for corpus sources and loading (NO MOCKS - real fixture files)."""

import pytest

from line_stylometry.core.errors import DataResolutionError
from line_stylometry.corpus import (
    DirectorySource,
    GutenbergSource,
    load_corpus,
    resolve_title,
    split_documents,
    strip_gutenberg_boilerplate,
)

from conftest import FIXTURE_TITLES, make_documents


class TestResolveTitle:
    """Test title resolution against the catalog."""

    def test_exact_title(self):
        """Test resolving catalog titles to Gutenberg IDs."""
        assert resolve_title('Pride and Prejudice') == '1342'
        assert resolve_title('The War of the Worlds') == '36'

    def test_case_and_whitespace_insensitive(self):
        """Test that case and spacing are ignored."""
        assert resolve_title('  the war   of the WORLDS ') == '36'

    def test_unknown_title(self):
        """Test that an unknown title fails."""
        with pytest.raises(DataResolutionError, match="Unknown title"):
            resolve_title('The Martian Chronicles')

    def test_partial_title_is_not_a_match(self):
        """Test that a title prefix does not match."""
        with pytest.raises(DataResolutionError):
            resolve_title('Pride')

    def test_ambiguous_title(self):
        """Test that a title matching several IDs fails."""
        catalog = {'1': 'Emma', '2': 'emma', '3': 'Persuasion'}
        with pytest.raises(DataResolutionError, match="ambiguous"):
            resolve_title('Emma', catalog)


class TestStripBoilerplate:
    """Test removal of the Project Gutenberg header and footer."""

    def test_markers_removed(self):
        """Test stripping the header, footer and BOM."""
        text = (
            "\ufeffThe Project Gutenberg eBook\n"
            "*** START OF THE PROJECT GUTENBERG EBOOK X ***\n"
            "\n"
            "  First line.  \n"
            "\n"
            "Second line.\n"
            "*** END OF THE PROJECT GUTENBERG EBOOK X ***\n"
            "License text\n"
        )
        assert strip_gutenberg_boilerplate(text) == ['First line.', '', 'Second line.']

    def test_text_without_markers_kept(self):
        """Test that text without markers is kept whole."""
        assert strip_gutenberg_boilerplate("a\n b \nc") == ['a', 'b', 'c']


class TestSources:
    """Test the directory and Gutenberg sources."""

    def test_directory_source_reads_fixture(self, fixture_source):
        """Test reading a fixture ebook from disk."""
        lines = fixture_source.fetch('Pride and Prejudice')

        assert lines[0].startswith('It is a truth universally acknowledged')
        assert not any('PROJECT GUTENBERG' in line for line in lines)
        assert not any(line != line.strip() for line in lines)

    def test_directory_source_missing_file(self, tmp_path):
        """Test that a missing file fails."""
        source = DirectorySource(tmp_path)
        with pytest.raises(DataResolutionError, match="No text file"):
            source.fetch('Emma')

    def test_directory_source_unknown_title(self, fixture_source):
        """Test that an unknown title fails before touching disk."""
        with pytest.raises(DataResolutionError):
            fixture_source.fetch('Not A Real Book')

    def test_gutenberg_url(self):
        """Test the Gutenberg cache URL for a title."""
        source = GutenbergSource()
        assert source.url_for('The War of the Worlds') == \
            "https://www.gutenberg.org/cache/epub/36/pg36.txt"


class TestLoadCorpus:
    """Test document numbering across books."""

    def test_ids_unique_and_sequential(self, fixture_documents):
        """Test that ids run 1..N without gaps."""
        ids = [d.document_id for d in fixture_documents]

        assert len(ids) == len(set(ids))
        assert ids == list(range(1, len(ids) + 1))

    def test_one_document_per_line(self, fixture_source, fixture_documents):
        """Test that every line becomes a document."""
        n_lines = sum(len(fixture_source.fetch(title)) for title in FIXTURE_TITLES)
        assert len(fixture_documents) == n_lines

    def test_ids_continue_across_books(self, fixture_source, fixture_documents):
        """Test that the second book's ids follow the first's."""
        n_first = len(fixture_source.fetch(FIXTURE_TITLES[0]))
        first_of_second = fixture_documents[n_first]

        assert first_of_second.title == FIXTURE_TITLES[1]
        assert first_of_second.document_id == n_first + 1
        assert first_of_second.raw_text.startswith('No one would have believed')

    def test_ids_stable_across_runs(self, fixture_source):
        """Test that loading twice gives identical documents."""
        first = load_corpus(FIXTURE_TITLES, fixture_source)
        second = load_corpus(FIXTURE_TITLES, fixture_source)
        assert first == second

    def test_duplicate_titles_loaded_once(self, fixture_source, fixture_documents):
        """Test that a repeated title is fetched once."""
        docs = load_corpus(FIXTURE_TITLES + [FIXTURE_TITLES[0]], fixture_source)
        assert docs == fixture_documents

    def test_unresolvable_title_fails(self, fixture_source):
        """Test that one bad title fails the whole load."""
        with pytest.raises(DataResolutionError):
            load_corpus(['Pride and Prejudice', 'Unknown Book'], fixture_source)

    def test_documents_are_immutable(self, fixture_documents):
        """Test that documents cannot be modified."""
        with pytest.raises(AttributeError):
            fixture_documents[0].title = 'Other'


class TestSplitDocuments:
    """Test the stratified train/test split."""

    def test_disjoint_and_complete(self):
        """Test that the split partitions the ids."""
        docs = make_documents(n_per_title=20)
        train_ids, test_ids = split_documents(docs, train_prop=0.75, seed=1)

        assert set(train_ids).isdisjoint(test_ids)
        assert set(train_ids) | set(test_ids) == {d.document_id for d in docs}
        assert list(train_ids) == sorted(train_ids)
        assert len(train_ids) == 30

    def test_stratified_by_title(self):
        """Test that both titles are equally represented in the test set."""
        docs = make_documents(n_per_title=20)
        _, test_ids = split_documents(docs, train_prop=0.75, seed=1)

        titles = {d.document_id: d.title for d in docs}
        test_titles = [titles[i] for i in test_ids]
        assert test_titles.count('A') == test_titles.count('B') == 5

    def test_reproducible(self):
        """Test that the split depends only on the seed."""
        docs = make_documents(n_per_title=20)
        assert split_documents(docs, seed=7) == split_documents(docs, seed=7)
        assert split_documents(docs, seed=7) != split_documents(docs, seed=8)

    def test_invalid_proportion(self):
        """Test that a training proportion of 1 is rejected."""
        docs = make_documents(n_per_title=5)
        with pytest.raises(ValueError):
            split_documents(docs, train_prop=1.0)
