"""DDL Toolkit command line package."""
