"""Catalog Cross-Filter Explorer: record store, filters, aggregations and dashboard session."""
