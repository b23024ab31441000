"""Integration tests for foodgraph.

These tests require a running Neo4j instance, configured through the
NEO4J_URI, NEO4J_USER, NEO4J_PASSWORD and NEO4J_DATABASE environment variables.

Run with: pytest tests/integration/ -v -m integration
Skip with: pytest -m "not integration"
"""
