"""Command line client for the Hypertube Catalog API."""
