"""Core services: type inference, table building, chart recommendation, batch runs."""
