"""citenotes: footnote and citation registry with reference-list rendering."""

__version__ = "0.1.0"
